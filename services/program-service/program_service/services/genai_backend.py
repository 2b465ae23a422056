from __future__ import annotations

import asyncio
import json
from typing import Any, Protocol

import structlog
from google import genai
from google.genai import types

from ..config import Settings, get_settings
from ..schemas.generation import GenerationOptions

logger = structlog.get_logger(__name__)


class BackendUnavailableError(RuntimeError):
    pass


class ProgramBackend(Protocol):
    async def generate(self, prompt: str, options: GenerationOptions) -> dict[str, Any]: ...


def is_quota_or_rate_limit_error(exc: Exception) -> bool:
    status = getattr(exc, "status_code", None) or getattr(exc, "code", None)
    if isinstance(status, int) and status in {403, 429}:
        return True

    text = str(exc).lower()
    patterns = (
        "quota",
        "rate limit",
        "too many requests",
        "resourceexhausted",
        "resource exhausted",
        "429",
    )
    return any(token in text for token in patterns)


def parse_json_object(response_text: str | None) -> dict[str, Any]:
    if not response_text:
        raise ValueError("Empty GenAI JSON response text")
    text = response_text.strip()
    if text.startswith("```"):
        text = text.strip("`")
        text = text[text.find("{") :] if "{" in text else text
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.error("genai_json_parse_error", error=str(exc), preview=text[:2000])
        raise ValueError(f"GenAI response is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        logger.error("genai_json_not_object", preview=text[:2000])
        raise ValueError("Non-dict GenAI JSON response")
    return parsed


class GenAIProgramBackend:
    """Generative backend backed by google-genai ``generate_content``."""

    def __init__(self, settings: Settings | None = None, client: genai.Client | None = None):
        self._settings = settings or get_settings()
        self._client = client

    def _get_client(self) -> genai.Client:
        if self._client is None:
            api_key = self._settings.genai_api_key
            if not api_key:
                raise BackendUnavailableError("GEMINI_API_KEY (or GOOGLE_API_KEY) must be set for program generation")
            self._client = genai.Client(api_key=api_key)
        return self._client

    async def generate(self, prompt: str, options: GenerationOptions) -> dict[str, Any]:
        client = self._get_client()
        model = options.model or self._settings.LLM_MODEL
        config = types.GenerateContentConfig(
            response_mime_type="application/json" if options.format == "json" else "text/plain",
            temperature=options.temperature,
            max_output_tokens=options.max_output_tokens,
        )
        try:
            response = await asyncio.to_thread(
                client.models.generate_content,
                model=model,
                contents=prompt,
                config=config,
            )
        except Exception as exc:
            logger.warning("genai_request_failed", model=model, error=str(exc))
            if is_quota_or_rate_limit_error(exc):
                raise BackendUnavailableError("GenAI quota exhausted") from exc
            raise

        candidate = response.candidates[0] if getattr(response, "candidates", None) else None
        logger.debug(
            "genai_response_received",
            model=model,
            finish_reason=str(getattr(candidate, "finish_reason", None)),
            usage=str(getattr(response, "usage_metadata", None)),
        )
        return parse_json_object(getattr(response, "text", None))
