"""Contract tests for the Cloud TTS client (mocked httpx)."""

import httpx
import pytest

from backend.core.speech import TTS_API_URL, SpeechError, TextToSpeechClient


def _response(status_code, json=None, text=""):
    request = httpx.Request("POST", TTS_API_URL)
    if json is not None:
        return httpx.Response(status_code, json=json, request=request)
    return httpx.Response(status_code, text=text, request=request)


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("GOOGLE_CLOUD_API_KEY", "tts-key")
    monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")
    return TextToSpeechClient()


class TestConfig:

    def test_prefers_cloud_key(self, client):
        assert client.api_key == "tts-key"

    def test_falls_back_to_gemini_key(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_CLOUD_API_KEY", raising=False)
        monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")
        assert TextToSpeechClient().api_key == "gemini-key"

    def test_missing_key(self, monkeypatch, mocker):
        monkeypatch.delenv("GOOGLE_CLOUD_API_KEY", raising=False)
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        post = mocker.patch("backend.core.speech.httpx.post")
        tts = TextToSpeechClient()

        assert not tts.is_healthy()
        with pytest.raises(SpeechError) as exc:
            tts.synthesize("Hola")
        assert exc.value.status_code == 500
        post.assert_not_called()


class TestSynthesize:

    def test_returns_audio(self, client, mocker):
        post = mocker.patch("backend.core.speech.httpx.post",
                            return_value=_response(200, json={"audioContent": "QVVESU8="}))

        assert client.synthesize("Tocá la ruedita") == "QVVESU8="
        kwargs = post.call_args.kwargs
        assert kwargs["params"] == {"key": "tts-key"}
        assert kwargs["json"]["input"] == {"text": "Tocá la ruedita"}
        assert kwargs["json"]["voice"]["name"] == "es-US-Neural2-A"
        assert kwargs["json"]["audioConfig"]["audioEncoding"] == "MP3"

    def test_forbidden_explains_enablement(self, client, mocker):
        mocker.patch("backend.core.speech.httpx.post", return_value=_response(403, text="denied"))
        with pytest.raises(SpeechError) as exc:
            client.synthesize("Hola")
        assert exc.value.status_code == 403
        assert "texttospeech.googleapis.com" in exc.value.detail

    def test_other_status_preserved(self, client, mocker):
        mocker.patch("backend.core.speech.httpx.post", return_value=_response(400, text="bad voice"))
        with pytest.raises(SpeechError) as exc:
            client.synthesize("Hola")
        assert exc.value.status_code == 400

    def test_network_error_is_502(self, client, mocker):
        mocker.patch("backend.core.speech.httpx.post", side_effect=httpx.ConnectError("refused"))
        with pytest.raises(SpeechError) as exc:
            client.synthesize("Hola")
        assert exc.value.status_code == 502

    def test_empty_audio_is_502(self, client, mocker):
        mocker.patch("backend.core.speech.httpx.post", return_value=_response(200, json={}))
        with pytest.raises(SpeechError) as exc:
            client.synthesize("Hola")
        assert exc.value.status_code == 502
