"""Tests for upstream failure classification."""

import httpx
import pytest

from backend.core.failure_classifier import (
    DEFAULT_RETRY_SECONDS,
    Classification,
    classify,
    describe,
    retry_after_seconds,
)


class StatusError(Exception):
    """Mimics SDK errors that carry a numeric status attribute."""

    def __init__(self, message, status=None, code=None):
        super().__init__(message)
        self.status = status
        self.code = code


class SDKStyleError(Exception):
    """Mimics google-genai APIError: int code, str status, message attribute."""

    def __init__(self, code, status, message):
        super().__init__(f"{code} {status}. {message}")
        self.code = code
        self.status = status
        self.message = message
        self.details = {"error": {"code": code, "status": status, "message": message}}


class TestRateLimitDetection:

    def test_status_429_without_hint_defaults_to_60(self):
        result = classify(StatusError("Too busy", status=429))
        assert result == Classification(kind="rate_limit", retry_after_seconds=60)

    def test_retry_hint_is_rounded_up(self):
        result = classify(StatusError("Please retry in 12.5 seconds.", status=429))
        assert result.kind == "rate_limit"
        assert result.retry_after_seconds == 13

    def test_sdk_error_with_code_and_hint(self):
        err = SDKStyleError(429, "RESOURCE_EXHAUSTED", "Quota exceeded. Please retry in 37.2s.")
        result = classify(err)
        assert result.is_rate_limit
        assert result.retry_after_seconds == 38

    @pytest.mark.parametrize("message", [
        "[429 Too Many Requests] slow down",
        "got 429 from upstream",
        "too many requests",
        "You exceeded your current QUOTA",
        "resource_exhausted: try later",
    ])
    def test_message_tokens(self, message):
        assert classify(Exception(message)).kind == "rate_limit"

    def test_serialized_form_mentions_rate(self):
        err = Exception("upstream said no")
        err.reason = "RateLimitExceeded"
        assert classify(err).kind == "rate_limit"

    def test_prose_only_rate_limit(self):
        result = classify(Exception("Rate limit exceeded for this API key"))
        assert result == Classification(kind="rate_limit", retry_after_seconds=DEFAULT_RETRY_SECONDS)

    def test_httpx_status_error(self):
        request = httpx.Request("POST", "http://test")
        response = httpx.Response(status_code=429, request=request)
        err = httpx.HTTPStatusError("Client error", request=request, response=response)
        assert classify(err).kind == "rate_limit"

    def test_dict_error(self):
        result = classify({"status": 429, "message": "retry in 5"})
        assert result == Classification(kind="rate_limit", retry_after_seconds=5)


class TestGeneralErrors:

    def test_connection_refused_message(self):
        result = classify(Exception("ECONNREFUSED"))
        assert result == Classification(kind="general")
        assert result.retry_after_seconds is None

    def test_server_error(self):
        assert classify(StatusError("Internal error", status=500)).kind == "general"

    def test_auth_error(self):
        assert classify(SDKStyleError(403, "PERMISSION_DENIED", "API key not valid")).kind == "general"

    def test_none(self):
        assert classify(None).kind == "general"


class TestIdempotence:

    @pytest.mark.parametrize("err", [
        StatusError("retry in 3", status=429),
        Exception("ECONNREFUSED"),
        {"message": "quota"},
    ])
    def test_same_error_same_result(self, err):
        assert classify(err) == classify(err)


class TestDescribe:

    def test_status_from_code_attribute(self):
        assert describe(SDKStyleError(503, "UNAVAILABLE", "overloaded")).status == 503

    def test_message_attribute_preferred(self):
        assert describe(SDKStyleError(500, "INTERNAL", "boom")).message == "boom"

    def test_plain_exception_has_no_status(self):
        desc = describe(ValueError("bad"))
        assert desc.status is None
        assert desc.message == "bad"

    def test_bool_is_not_a_status(self):
        err = Exception("x")
        err.status = True
        assert describe(err).status is None


class TestRetryAfter:

    @pytest.mark.parametrize("message, expected", [
        ("Please retry in 12.5 seconds", 13),
        ("RETRY IN 7s", 7),
        ("retry in 0.2s", 1),
        ("retry in 0s", 0),
        ("no hint here", DEFAULT_RETRY_SECONDS),
        ("", DEFAULT_RETRY_SECONDS),
    ])
    def test_parsing(self, message, expected):
        assert retry_after_seconds(message) == expected
