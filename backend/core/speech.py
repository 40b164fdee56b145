"""Google Cloud Text-to-Speech client.

Returns base64 MP3 audio for a reply. Failures raise SpeechError carrying the
HTTP status to surface; the chat client falls back to browser speech.
"""

import os

import httpx
import structlog

logger = structlog.get_logger(__name__)

TTS_API_URL = "https://texttospeech.googleapis.com/v1/text:synthesize"

# Latin American Spanish neural voice, a bit slower than normal for elderly listeners
VOICE = {"languageCode": "es-US", "name": "es-US-Neural2-A"}
AUDIO_CONFIG = {"audioEncoding": "MP3", "speakingRate": 0.9, "pitch": 0}


class SpeechError(Exception):
    """Text-to-speech request failed."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class TextToSpeechClient:
    """Thin wrapper over the TTS REST endpoint."""

    def __init__(self):
        self.api_key = os.environ.get("GOOGLE_CLOUD_API_KEY") or os.environ.get("GEMINI_API_KEY", "")
        self.timeout = float(os.environ.get("TTS_TIMEOUT", "15"))

    def is_healthy(self) -> bool:
        return bool(self.api_key)

    def synthesize(self, text: str) -> str:
        """Synthesize speech for text.

        Args:
            text: Reply text to read aloud.

        Returns:
            Base64-encoded MP3 audio.

        Raises:
            SpeechError: Missing key (500), API disabled (403) or any upstream error.
        """
        if not self.api_key:
            raise SpeechError(500, "API key not configured")

        payload = {"input": {"text": text}, "voice": VOICE, "audioConfig": AUDIO_CONFIG}

        try:
            response = httpx.post(
                TTS_API_URL,
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logger.error("tts.request_failed", error=str(e))
            raise SpeechError(502, "TTS service unreachable")

        if response.status_code == 403:
            logger.error("tts.forbidden", body=response.text[:300])
            raise SpeechError(
                403,
                "TTS API not enabled. Enable it at: "
                "https://console.cloud.google.com/apis/library/texttospeech.googleapis.com",
            )
        if response.is_error:
            logger.error("tts.upstream_error", status=response.status_code, body=response.text[:300])
            raise SpeechError(response.status_code, "TTS API error")

        audio = response.json().get("audioContent")
        if not audio:
            raise SpeechError(502, "TTS API returned no audio")

        logger.info("tts.ok", chars=len(text))
        return audio
