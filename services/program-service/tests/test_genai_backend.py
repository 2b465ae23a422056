import asyncio
from types import SimpleNamespace

import pytest

from program_service.config import Settings
from program_service.schemas.generation import GenerationOptions
from program_service.services.genai_backend import (
    BackendUnavailableError,
    GenAIProgramBackend,
    is_quota_or_rate_limit_error,
    parse_json_object,
)


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text, candidates=[], usage_metadata=None)


def _backend(models, **settings):
    return GenAIProgramBackend(settings=Settings(**settings), client=SimpleNamespace(models=models))


def test_parse_json_object_strips_code_fences():
    assert parse_json_object('```json\n{"programName": "A"}\n```') == {"programName": "A"}
    assert parse_json_object('  {"a": 1}  ') == {"a": 1}


@pytest.mark.parametrize("text", [None, "", "not json", "[1, 2]"])
def test_parse_json_object_rejects_non_objects(text):
    with pytest.raises(ValueError):
        parse_json_object(text)


def test_generate_sends_json_config():
    models = FakeModels(text='{"programName": "A"}')
    backend = _backend(models, LLM_MODEL="gemini-test")
    payload = asyncio.run(backend.generate("prompt", GenerationOptions(max_output_tokens=1000, temperature=0.2)))

    assert payload == {"programName": "A"}
    call = models.calls[0]
    assert call["model"] == "gemini-test"
    assert call["contents"] == "prompt"
    assert call["config"].response_mime_type == "application/json"
    assert call["config"].max_output_tokens == 1000


def test_quota_errors_become_backend_unavailable():
    backend = _backend(FakeModels(error=RuntimeError("429 RESOURCE_EXHAUSTED: quota exceeded")))
    with pytest.raises(BackendUnavailableError):
        asyncio.run(backend.generate("prompt", GenerationOptions()))


def test_missing_api_key_is_reported():
    backend = GenAIProgramBackend(settings=Settings(GEMINI_API_KEY="", GOOGLE_API_KEY=""))
    with pytest.raises(BackendUnavailableError):
        asyncio.run(backend.generate("prompt", GenerationOptions()))


def test_quota_detection():
    assert is_quota_or_rate_limit_error(SimpleNamespace(status_code=429))
    assert is_quota_or_rate_limit_error(RuntimeError("Too Many Requests"))
    assert not is_quota_or_rate_limit_error(RuntimeError("invalid argument"))
