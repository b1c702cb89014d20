import pytest

from api import context as context_module
from api.config import Settings
from api.context import build_context
from api.errors import ConfigurationError
from api.services import example_service
from api.services.example_cache import InMemoryExampleCache, UpstashExampleCache
from api.services.rate_limiter import InMemoryRateLimiter, UpstashRateLimiter


@pytest.fixture
def sqlite_settings(tmp_path):
    def make(**overrides):
        return Settings(database_url=f"sqlite:///{tmp_path / 'ctx.db'}", **overrides)
    return make


@pytest.fixture
def recorded_openai(monkeypatch):
    created = []

    class RecordingOpenAI:
        def __init__(self, **kwargs):
            created.append(kwargs)

    monkeypatch.setattr(example_service, "_openai_clients", {})
    monkeypatch.setattr(example_service.openai, "OpenAI", RecordingOpenAI)
    return created


def test_memory_backend_without_api_key(sqlite_settings, recorded_openai):
    ctx = build_context(sqlite_settings())

    assert isinstance(ctx.rate_limiter, InMemoryRateLimiter)
    assert isinstance(ctx.example_cache, InMemoryExampleCache)
    assert ctx.example_generator is None
    assert recorded_openai == []


def test_api_key_enables_generator_without_retries(sqlite_settings, recorded_openai):
    ctx = build_context(sqlite_settings(openai_api_key="sk-test", upstream_timeout=3.0, openai_model="gpt-x"))

    assert ctx.example_generator is not None
    assert ctx.example_generator.model == "gpt-x"
    assert recorded_openai == [{"api_key": "sk-test", "timeout": 3.0, "max_retries": 0}]


def test_redis_backend_uses_upstash_implementations(sqlite_settings, monkeypatch):
    monkeypatch.setattr(context_module, "get_redis", lambda settings: object())

    ctx = build_context(sqlite_settings(state_backend="redis"))

    assert isinstance(ctx.rate_limiter, UpstashRateLimiter)
    assert isinstance(ctx.example_cache, UpstashExampleCache)


def test_redis_backend_without_client_fails_fast(sqlite_settings, monkeypatch):
    monkeypatch.setattr(context_module, "get_redis", lambda settings: None)

    with pytest.raises(ConfigurationError):
        build_context(sqlite_settings(state_backend="redis"))


def test_verifier_receives_configured_timeout(sqlite_settings, monkeypatch):
    calls = []
    monkeypatch.setattr(
        context_module,
        "verify_google_token",
        lambda token, timeout: calls.append((token, timeout)),
    )

    ctx = build_context(sqlite_settings(upstream_timeout=1.5))
    ctx.verify_token("tok")

    assert calls == [("tok", 1.5)]
