from types import SimpleNamespace

import pytest
from tenacity import wait_none

from issue_drafter.llm.gemini import (
    GeminiClient,
    GeminiConfig,
    MediaPart,
    StructuredOutputError,
    _is_transient,
    decode_json_text,
    extract_text,
)
from issue_drafter.llm.schemas import as_request_schema


class FakeModels:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        return self.response


def _client(response, **config):
    client = GeminiClient(GeminiConfig(api_key="test-key", **config))
    models = FakeModels(response)
    client._client = SimpleNamespace(models=models)
    return client, models


def test_extract_text_prefers_text_then_parts():
    assert extract_text(SimpleNamespace(text="  hi  ")) == "hi"
    part = SimpleNamespace(text="from parts")
    resp = SimpleNamespace(text=None, candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])
    assert extract_text(resp) == "from parts"
    with pytest.raises(RuntimeError):
        extract_text(SimpleNamespace(text="", candidates=[]))


def test_decode_json_text_handles_fences():
    assert decode_json_text('```json\n[{"title": "A"}]\n```') == [{"title": "A"}]
    with pytest.raises(StructuredOutputError) as info:
        decode_json_text("ISSUE 1:\nTITLE: x")
    assert info.value.raw_text.startswith("ISSUE 1:")


def test_transient_errors():
    assert _is_transient(ConnectionError())
    assert _is_transient(TimeoutError())
    assert _is_transient(SimpleNamespace(code=503))
    assert not _is_transient(SimpleNamespace(code=400))
    assert not _is_transient(ValueError("bad"))


def test_generate_text():
    client, models = _client(SimpleNamespace(text="plain answer"), model="gemini-test")
    assert client.generate("hello", system_prompt="be brief") == "plain answer"
    call = models.calls[0]
    assert call["model"] == "gemini-test"
    assert call["contents"] == "hello"
    assert call["config"].response_mime_type is None


def test_generate_empty_prompt_skips_model():
    client, models = _client(SimpleNamespace(text="unused"))
    assert client.generate("   ") == ""
    assert models.calls == []


def test_generate_structured_uses_parsed_then_text():
    client, models = _client(SimpleNamespace(parsed=[{"title": "A"}], text="ignored"))
    media = MediaPart(data=b"\x89PNG", mime_type="image/png")
    assert client.generate("find issues", media=media, schema=as_request_schema()) == [{"title": "A"}]
    call = models.calls[0]
    assert call["config"].response_mime_type == "application/json"
    assert isinstance(call["contents"], list) and call["contents"][1] == "find issues"

    client, _ = _client(SimpleNamespace(parsed=None, text='[{"title": "B"}]'))
    assert client.generate("find issues", schema=as_request_schema()) == [{"title": "B"}]


def test_structured_output_flag_is_exposed():
    client, _ = _client(SimpleNamespace(text="x"), structured_output=False)
    assert client.supports_structured_output is False


class ApiError(Exception):
    def __init__(self, code):
        super().__init__(f"HTTP {code}")
        self.code = code


class FlakyModels:
    """Raises the queued errors first, then returns the response."""

    def __init__(self, errors, response):
        self.errors = list(errors)
        self.response = response
        self.attempts = 0

    def generate_content(self, *, model, contents, config):
        self.attempts += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.response


@pytest.fixture
def no_retry_wait(monkeypatch):
    monkeypatch.setattr(GeminiClient._generate_content.retry, "wait", wait_none())


def _flaky_client(errors, response=None):
    client = GeminiClient(GeminiConfig(api_key="test-key"))
    models = FlakyModels(errors, response or SimpleNamespace(text="recovered"))
    client._client = SimpleNamespace(models=models)
    return client, models


@pytest.mark.parametrize("error", [ApiError(503), ApiError(429), ConnectionError("reset"), TimeoutError()])
def test_transient_error_is_retried(no_retry_wait, error):
    client, models = _flaky_client([error])
    assert client.generate("hello") == "recovered"
    assert models.attempts == 2


def test_client_error_is_not_retried(no_retry_wait):
    client, models = _flaky_client([ApiError(400)])
    with pytest.raises(ApiError):
        client.generate("hello")
    assert models.attempts == 1


def test_gives_up_after_three_attempts(no_retry_wait):
    client, models = _flaky_client([ApiError(503)] * 4)
    with pytest.raises(ApiError) as info:
        client.generate("hello")
    assert info.value.code == 503
    assert models.attempts == 3
