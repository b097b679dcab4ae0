import json

import pytest
import requests

from studio_bingo.errors import ServiceUnavailableError, UpstreamError
from studio_bingo.services.vision_client import VisionClient, extract_response_text, strip_json_fences


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self.ok = 200 <= status_code < 400
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeHttp:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.requests.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def model_answer(text):
    return FakeResponse(payload={"output_text": text})


def client_with(http, api_key="sk-test"):
    return VisionClient(api_key=api_key, base_url="https://vision.test/v1/", timeout_sec=5, http=http)


def test_strip_json_fences():
    assert strip_json_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_json_fences('Sure! {"a": {"b": 2}} hope that helps') == '{"a": {"b": 2}}'
    assert strip_json_fences('{"a": 1}') == '{"a": 1}'
    assert strip_json_fences(None) == ""


def test_extract_response_text():
    assert extract_response_text({"output_text": "  hi "}) == "hi"

    payload = {
        "output": [
            {"type": "reasoning", "content": [{"text": "ignored"}]},
            {"type": "message", "content": [{"type": "output_text", "text": '{"a":'}, {"text": " 1}"}]},
        ]
    }
    assert extract_response_text(payload) == '{"a": 1}'
    assert extract_response_text({}) == ""


def test_detect_marks_sends_image_and_parses_answer():
    answer = {"week": "week1", "marked_cells": [{"r": 0, "c": 0}], "confidence": 0.9, "notes": ""}
    http = FakeHttp(model_answer("```json\n" + json.dumps(answer) + "\n```"))

    result = client_with(http).detect_marks(b"\x89PNG", "image/png")

    assert result == answer
    sent = http.requests[0]
    assert sent["url"] == "https://vision.test/v1/responses"
    assert sent["headers"]["Authorization"] == "Bearer sk-test"
    assert sent["timeout"] == 5
    image_part = sent["json"]["input"][0]["content"][1]
    assert image_part["image_url"].startswith("data:image/png;base64,")


def test_read_cell_labels_returns_cells_value():
    http = FakeHttp(model_answer(json.dumps({"cells": ["a", "b"]})))
    assert client_with(http).read_cell_labels(b"img", "image/jpeg") == ["a", "b"]


def test_not_configured():
    client = client_with(FakeHttp(), api_key="")
    assert client.configured is False
    with pytest.raises(ServiceUnavailableError) as exc:
        client.detect_marks(b"img", "image/jpeg")
    assert exc.value.code == "vision_not_configured"
    assert exc.value.status_code == 503


def test_timeout_is_retryable():
    with pytest.raises(UpstreamError) as exc:
        client_with(FakeHttp(error=requests.Timeout("slow"))).detect_marks(b"img", "image/jpeg")
    assert exc.value.code == "upstream_timeout"
    assert exc.value.retryable is True
    assert exc.value.details["retryable"] is True


def test_connection_failure():
    with pytest.raises(UpstreamError) as exc:
        client_with(FakeHttp(error=requests.ConnectionError("refused"))).detect_marks(b"img", "image/jpeg")
    assert exc.value.code == "upstream_unreachable"
    assert exc.value.status_code == 502


def test_http_error_keeps_truncated_body():
    http = FakeHttp(FakeResponse(status_code=400, text="x" * 5000))
    with pytest.raises(UpstreamError) as exc:
        client_with(http).detect_marks(b"img", "image/jpeg")
    assert exc.value.code == "openai_error"
    assert exc.value.details["status"] == 400
    assert len(exc.value.details["body"]) == 2000
    assert exc.value.retryable is False


def test_server_error_is_retryable():
    http = FakeHttp(FakeResponse(status_code=503, text="busy"))
    with pytest.raises(UpstreamError) as exc:
        client_with(http).detect_marks(b"img", "image/jpeg")
    assert exc.value.retryable is True


@pytest.mark.parametrize("text", ["I cannot read this card", "[1, 2, 3]", ""])
def test_unusable_answers(text):
    with pytest.raises(UpstreamError) as exc:
        client_with(FakeHttp(model_answer(text))).detect_marks(b"img", "image/jpeg")
    assert exc.value.code == "bad_openai_json"


def test_non_json_envelope():
    http = FakeHttp(FakeResponse(status_code=200, payload=None, text="<html>"))
    with pytest.raises(UpstreamError) as exc:
        client_with(http).detect_marks(b"img", "image/jpeg")
    assert exc.value.code == "bad_openai_json"
