"""
Example Service
Generates a German example sentence with its Indonesian translation
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

import openai

from ..errors import GenerationError

DEFAULT_MODEL = "gpt-3.5-turbo"
MAX_TOKENS = 200
TEMPERATURE = 0.5

SYSTEM_MESSAGE = (
    "Kamu asisten yang menulis satu kalimat Jerman singkat dan terjemahannya "
    "dalam Bahasa Indonesia. Hanya output JSON, tanpa penjelasan tambahan."
)

PROMPT_TEMPLATE = """Buat satu contoh kalimat singkat dalam bahasa Jerman yang menggunakan kata "{word}".
Berikan juga terjemahan dalam bahasa Indonesia.
Output hanya berupa JSON dengan dua properti: "german" dan "translation".
Gunakan Zeitform: {{Präsens / Perfekt}}.
Gunakan 1 subject {{ich, du, er/sie/es, wir, ihr, sie}}.
Pastikan konjugasi kata kerja sesuai dengan subjek.
Jika menggunakan Perfekt, pilih auxiliary verb (haben/sein) yang tepat.

Contoh output:
{{
  "german": "Das ist ein Beispiel.",
  "translation": "Ini adalah contoh."
}}

Jangan tambahan penjelasan lain."""

PARSED_JSON = "json"
PARSED_LINES = "lines"


@dataclass(frozen=True)
class ExampleResult:
    german: str = ""
    translation: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"german": self.german, "translation": self.translation}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExampleResult":
        return cls(
            german=_as_text(data.get("german")),
            translation=_as_text(data.get("translation")),
        )


@dataclass(frozen=True)
class ParsedExample:
    """Parse outcome; source tells which path produced the result."""
    result: ExampleResult
    source: str


def _as_text(value: Any) -> str:
    if value is None or value == "":
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def build_prompt(word: str) -> str:
    return PROMPT_TEMPLATE.format(word=word)


def parse_example_text(text: str) -> ParsedExample:
    """
    Turn the model's reply into an ExampleResult.

    A JSON object is read directly. Anything else falls back to lines: first
    non-blank line is the sentence, second is the translation (or ""). Lines
    are returned as written, only the reply as a whole is trimmed.
    """
    text = (text or "").strip()

    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = None

    if isinstance(parsed, dict):
        return ParsedExample(ExampleResult.from_dict(parsed), PARSED_JSON)

    lines = [line for line in text.split("\n") if line.strip()]
    german = lines[0] if lines else text
    translation = lines[1] if len(lines) > 1 else ""
    return ParsedExample(ExampleResult(german=german, translation=translation), PARSED_LINES)


_openai_clients: Dict[str, Any] = {}


def get_openai_client(api_key: str, timeout: float):
    """Get an OpenAI client per API key. Retries are disabled."""
    client = _openai_clients.get(api_key)
    if client is None:
        client = openai.OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        _openai_clients[api_key] = client
    return client


class ExampleGenerator:
    """Calls the chat completion endpoint and parses its reply."""

    def __init__(self, client, model: str = DEFAULT_MODEL):
        self.client = client
        self.model = model

    def generate(self, word: str) -> ParsedExample:
        """
        Raises:
            GenerationError: transport failure, timeout or unusable payload
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_MESSAGE},
                    {"role": "user", "content": build_prompt(word)},
                ],
                max_tokens=MAX_TOKENS,
                temperature=TEMPERATURE,
            )
        except openai.APITimeoutError as e:
            raise GenerationError("OpenAI API error: request timed out") from e
        except openai.APIStatusError as e:
            raise GenerationError(f"OpenAI API error: {_status_message(e)}") from e
        except openai.OpenAIError as e:
            raise GenerationError(f"OpenAI API error: {e.__class__.__name__}") from e

        content = _message_content(response)
        if content is None:
            raise GenerationError("Invalid OpenAI response")

        return parse_example_text(content)


def _status_message(error) -> str:
    body = getattr(error, "body", None)
    if isinstance(body, dict):
        error_body = body.get("error")
        message = body.get("message")
        if not message and isinstance(error_body, dict):
            message = error_body.get("message")
        if message:
            return message
    return f"status {getattr(error, 'status_code', 'unknown')}"


def _message_content(response) -> Optional[str]:
    choices = getattr(response, "choices", None)
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    if message is None:
        return None
    content = getattr(message, "content", None)
    if not isinstance(content, str):
        return None
    return content
