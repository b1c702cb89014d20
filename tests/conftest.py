"""Shared fixtures: SQLite store, fake Google/OpenAI, in-memory context."""

import json
from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool

from api.config import Settings
from api.context import AppContext
from api.data import create_session_factory, init_db
from api.errors import ConfigurationError, VerificationError
from api.security.validators import parse_json_body
from api.services import (
    ExampleGenerator,
    InMemoryExampleCache,
    InMemoryRateLimiter,
    VerifiedIdentity,
)


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCompletions:
    """Stands in for client.chat.completions; replies are strings or exceptions."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=reply))]
        )


class FakeOpenAI:
    def __init__(self, *replies):
        self.completions = FakeCompletions(replies)
        self.chat = SimpleNamespace(completions=self.completions)


class FakeVerifier:
    """Maps access tokens to identities; unknown tokens are rejected."""

    def __init__(self, identities=None):
        self.identities = dict(identities or {})
        self.calls = []

    def __call__(self, access_token: str) -> VerifiedIdentity:
        self.calls.append(access_token)
        identity = self.identities.get(access_token)
        if identity is None:
            raise VerificationError(
                VerificationError.PROVIDER_REJECTED, "Google verification failed: 401"
            )
        return identity


class FakeHandler:
    """The slice of api.index.handler that route functions use."""

    def __init__(self, context, body=None, headers=None, raw=None):
        self.context = context
        self.headers = headers or {}
        if raw is None:
            raw = json.dumps(body).encode() if body is not None else b""
        self._raw = raw

    def read_body(self, endpoint_type: str = "general") -> dict:
        return parse_json_body(self._raw)


class BrokenConfigHandler(FakeHandler):
    """A handler whose context cannot be built."""

    @property
    def context(self):
        raise ConfigurationError("STATE_BACKEND=redis but Upstash Redis is unavailable")

    @context.setter
    def context(self, value):
        pass


GOOD_REPLY = json.dumps({"german": "Das Haus ist groß.", "translation": "Rumah itu besar."})


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'wortle.db'}", poolclass=NullPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def openai_client():
    return FakeOpenAI(GOOD_REPLY)


@pytest.fixture
def verifier():
    return FakeVerifier({
        "token-alice": VerifiedIdentity(
            subject="google-sub-alice",
            email="alice@example.com",
            name="Alice",
            picture="https://example.com/alice.png",
        ),
    })


@pytest.fixture
def settings():
    return Settings(openai_api_key="sk-test", cors_origin="*")


@pytest.fixture
def context(settings, session_factory, clock, openai_client, verifier):
    return AppContext(
        settings=settings,
        session_factory=session_factory,
        rate_limiter=InMemoryRateLimiter(clock=clock),
        example_cache=InMemoryExampleCache(),
        verify_token=verifier,
        example_generator=ExampleGenerator(openai_client),
    )
