"""LLM backend for fitcoach using Gemini via the google-genai SDK.

The model is a black box to the pipeline: it receives a system instruction,
the recent conversation and the latest user text, and hands back raw text.
Every SDK or network failure is translated into a RemoteGenerationFailure
tagged with its cause.
"""

import logging
import os
from dataclasses import dataclass
from typing import Protocol

import httpx
from google import genai
from google.genai import errors as genai_errors

from fitcoach.agent.errors import FailureKind, RemoteGenerationFailure

logger = logging.getLogger(__name__)

MODEL = os.environ.get("LLM_MODEL", "gemini-2.5-flash")
TIMEOUT_SECONDS = float(os.environ.get("LLM_TIMEOUT_SECONDS", "30"))


@dataclass(frozen=True)
class GenerationParams:
    temperature: float = 0.7
    max_output_tokens: int = 800
    stream: bool = False


DEFAULT_PARAMS = GenerationParams()


class TextGenerator(Protocol):
    """Anything that can turn (instruction, history, user text) into reply text."""

    def generate(
        self,
        system_instruction: str,
        history: list,
        user_text: str,
        params: GenerationParams = DEFAULT_PARAMS,
    ) -> str: ...


def get_client(timeout_seconds: float = TIMEOUT_SECONDS) -> genai.Client:
    """Create a Gemini client using the API key from environment."""
    api_key = os.environ.get("GEMINI_API_KEY")
    if not api_key:
        raise RemoteGenerationFailure(FailureKind.AUTH, "GEMINI_API_KEY not set in environment")
    return genai.Client(
        api_key=api_key,
        http_options=genai.types.HttpOptions(timeout=int(timeout_seconds * 1000)),
    )


def test_connection() -> str:
    """Send a test prompt to Gemini and return the response text."""
    client = get_client()
    response = client.models.generate_content(
        model=MODEL,
        contents="Say 'fitcoach connected successfully' and nothing else.",
    )
    return response.text


def classify_api_error(exc: genai_errors.APIError) -> FailureKind:
    """Map a Gemini API error status onto a failure kind."""
    code = getattr(exc, "code", None) or 0
    if code in (401, 403):
        return FailureKind.AUTH
    if code == 429:
        return FailureKind.RATE_LIMIT
    return FailureKind.SERVER_ERROR


def to_contents(history: list, user_text: str) -> list[genai.types.Content]:
    """Convert conversation turns plus the new user text into Gemini contents.

    Assistant turns use Gemini's "model" role.
    """
    contents = []
    for turn in history:
        role = "model" if turn.role == "assistant" else "user"
        contents.append(
            genai.types.Content(role=role, parts=[genai.types.Part(text=turn.content)])
        )
    contents.append(
        genai.types.Content(role="user", parts=[genai.types.Part(text=user_text)])
    )
    return contents


class GeminiGenerator:
    """Non-streaming Gemini text generation with typed failures.

    Usage:
        generator = GeminiGenerator()
        text = generator.generate(system_prompt, history, "Give me a leg day")
    """

    def __init__(self, client: genai.Client | None = None, model: str = MODEL):
        self._client = client
        self.model = model

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = get_client()
        return self._client

    def generate(
        self,
        system_instruction: str,
        history: list,
        user_text: str,
        params: GenerationParams = DEFAULT_PARAMS,
    ) -> str:
        if params.stream:
            raise ValueError("Streaming generation is not supported by the pipeline")

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=to_contents(history, user_text),
                config=genai.types.GenerateContentConfig(
                    system_instruction=system_instruction,
                    temperature=params.temperature,
                    max_output_tokens=params.max_output_tokens,
                ),
            )
        except genai_errors.APIError as e:
            kind = classify_api_error(e)
            logger.error("Gemini API error (%s): %s", kind.value, e)
            raise RemoteGenerationFailure(kind, str(e), status_code=getattr(e, "code", None)) from e
        except httpx.TransportError as e:
            logger.error("Gemini transport error: %s", e)
            raise RemoteGenerationFailure(FailureKind.TRANSPORT, str(e)) from e

        return response.text or ""
