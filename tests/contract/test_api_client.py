"""Contract tests for the Streamlit client's HTTP layer (requests mocked)."""

from unittest.mock import MagicMock

import pytest
import requests

from frontend import api_client
from frontend.state import ErrorKind, ErrorState, PendingTurn


def _response(status_code, body=None, headers=None):
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status_code
    resp.headers = headers or {}
    if body is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = body
    return resp


@pytest.fixture
def pending():
    return PendingTurn(message="No anda", image=None,
                       history=[{"role": "user", "content": "hola", "timestamp": 1}])


class TestPostTurn:

    def test_success_returns_body(self, pending, mocker):
        post = mocker.patch("frontend.api_client.requests.post",
                            return_value=_response(200, {"reply": "¿Probaste reiniciar?"}))
        result = api_client.post_turn(pending)
        assert result == {"reply": "¿Probaste reiniciar?"}

        payload = post.call_args.kwargs["json"]
        assert payload["message"] == "No anda"
        assert payload["conversationHistory"] == pending.history

    def test_rate_limit_uses_body_retry_after(self, pending, mocker):
        mocker.patch("frontend.api_client.requests.post",
                     return_value=_response(429, {"error": "rate_limit", "retryAfter": 13}))
        assert api_client.post_turn(pending) == ErrorState.rate_limit(13)

    def test_rate_limit_header_fallback(self, pending, mocker):
        mocker.patch("frontend.api_client.requests.post",
                     return_value=_response(429, None, headers={"Retry-After": "20"}))
        assert api_client.post_turn(pending).retry_after_seconds == 20

    def test_rate_limit_default(self, pending, mocker):
        mocker.patch("frontend.api_client.requests.post", return_value=_response(429, {}))
        assert api_client.post_turn(pending).retry_after_seconds == api_client.DEFAULT_RETRY_SECONDS

    @pytest.mark.parametrize("value", ["inf", "NaN", "soon"])
    def test_unusable_retry_after_uses_default(self, pending, mocker, value):
        mocker.patch("frontend.api_client.requests.post",
                     return_value=_response(429, {"error": "rate_limit", "retryAfter": value}))
        assert api_client.post_turn(pending).retry_after_seconds == api_client.DEFAULT_RETRY_SECONDS

    @pytest.mark.parametrize("status", [400, 500, 503])
    def test_other_status_is_general(self, pending, mocker, status):
        mocker.patch("frontend.api_client.requests.post", return_value=_response(status, {"error": "general"}))
        assert api_client.post_turn(pending).kind == ErrorKind.GENERAL

    def test_reply_missing_is_general(self, pending, mocker):
        mocker.patch("frontend.api_client.requests.post", return_value=_response(200, {"foo": 1}))
        assert api_client.post_turn(pending).kind == ErrorKind.GENERAL

    @pytest.mark.parametrize("exc", [requests.ConnectionError("down"), requests.Timeout("slow")])
    def test_network_errors_are_connection(self, pending, mocker, exc):
        mocker.patch("frontend.api_client.requests.post", side_effect=exc)
        assert api_client.post_turn(pending).kind == ErrorKind.CONNECTION


class TestFetchSpeech:

    def test_returns_audio(self, mocker):
        mocker.patch("frontend.api_client.requests.post", return_value=_response(200, {"audioContent": "QUJD"}))
        assert api_client.fetch_speech("hola") == "QUJD"

    def test_error_status_returns_none(self, mocker):
        mocker.patch("frontend.api_client.requests.post", return_value=_response(403, {"error": "x"}))
        assert api_client.fetch_speech("hola") is None

    def test_network_error_returns_none(self, mocker):
        mocker.patch("frontend.api_client.requests.post", side_effect=requests.ConnectionError("down"))
        assert api_client.fetch_speech("hola") is None


class TestCheckHealth:

    def test_offline(self, mocker):
        mocker.patch("frontend.api_client.requests.get", side_effect=requests.ConnectionError("down"))
        assert api_client.check_health() == "offline"

    def test_status_passthrough(self, mocker):
        mocker.patch("frontend.api_client.requests.get", return_value=_response(200, {"status": "healthy"}))
        assert api_client.check_health() == "healthy"
