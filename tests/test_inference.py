"""Tests for the provider chat-completion call."""

import pytest

from zerog_inference_demo.errors import InferenceError
from zerog_inference_demo.inference import get_new_headers, make_inference_request
from zerog_inference_demo.types import InferenceResult

from .conftest import ENDPOINT, MODEL, PROVIDER, FakeResponse, FakeSession, success_body


class TestMakeInferenceRequest:
    """Request shape and response parsing."""

    def test_request_shape(self):
        session = FakeSession([FakeResponse(success_body())])

        make_inference_request(
            ENDPOINT, {"Authorization": "sig"}, "ping", MODEL, timeout=30, session=session
        )

        method, url, kwargs = session.calls[0]
        assert method == "POST"
        assert url == f"{ENDPOINT}/chat/completions"
        assert kwargs["headers"] == {"Content-Type": "application/json", "Authorization": "sig"}
        assert kwargs["json"] == {
            "messages": [{"role": "system", "content": "ping"}],
            "model": MODEL,
        }
        assert kwargs["timeout"] == 30

    def test_trailing_slash_endpoint(self):
        session = FakeSession([FakeResponse(success_body())])

        make_inference_request(ENDPOINT + "/", {}, "ping", MODEL, session=session)

        assert session.calls[0][1] == f"{ENDPOINT}/chat/completions"

    def test_parses_success(self):
        session = FakeSession([FakeResponse(success_body("pong"))])

        result = make_inference_request(ENDPOINT, {}, "ping", MODEL, session=session)

        assert result.content == "pong"
        assert result.is_success
        assert result.error is None

    def test_error_body_parsed_despite_status(self):
        session = FakeSession([FakeResponse({"error": "settleFee"}, status_code=400)])

        result = make_inference_request(ENDPOINT, {}, "ping", MODEL, session=session)

        assert result.error == "settleFee"
        assert not result.is_success

    def test_non_json_body(self):
        session = FakeSession([FakeResponse(ValueError("bad"), status_code=502, text="Bad Gateway")])

        with pytest.raises(InferenceError):
            make_inference_request(ENDPOINT, {}, "ping", MODEL, session=session)

    def test_non_object_body(self):
        session = FakeSession([FakeResponse([1, 2, 3])])

        with pytest.raises(InferenceError):
            make_inference_request(ENDPOINT, {}, "ping", MODEL, session=session)


class TestInferenceResult:
    """Pass-through response DTO."""

    def test_missing_message(self):
        result = InferenceResult.model_validate({"choices": [{}]})
        assert result.content is None
        assert not result.is_success

    def test_extra_fields_kept(self):
        result = InferenceResult.model_validate({**success_body(), "usage": {"total_tokens": 7}})
        assert result.model_dump()["usage"] == {"total_tokens": 7}


def test_get_new_headers_delegates_to_broker(broker):
    first = get_new_headers(broker, PROVIDER, "ping")
    second = get_new_headers(broker, PROVIDER, "ping")

    assert first != second
    assert broker.calls_named("get_request_headers") == [
        ("get_request_headers", PROVIDER, "ping"),
        ("get_request_headers", PROVIDER, "ping"),
    ]
