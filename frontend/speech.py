"""Read-aloud playback for assistant replies.

Only one utterance may play at a time: SpeechPlayer owns the single playback
slot and always stops the current one before starting another.
"""

import json
from dataclasses import dataclass
from typing import Callable

FALLBACK_LANG = "es-AR"
FALLBACK_RATE = 0.85


@dataclass
class Utterance:
    index: int
    text: str
    audio_base64: str | None = None

    @property
    def uses_browser_voice(self) -> bool:
        return self.audio_base64 is None


class SpeechPlayer:
    """Exclusive owner of the playback slot."""

    def __init__(self, fetch_audio: Callable[[str], str | None]):
        self._fetch_audio = fetch_audio
        self.current: Utterance | None = None

    def is_speaking(self, index: int | None = None) -> bool:
        if self.current is None:
            return False
        return index is None or self.current.index == index

    def start(self, index: int, text: str) -> Utterance:
        """Stop whatever is playing, then acquire the slot for this message."""
        self.stop()
        self.current = Utterance(index=index, text=text, audio_base64=self._fetch_audio(text))
        return self.current

    def toggle(self, index: int, text: str) -> Utterance | None:
        """Play button behaviour: pressing it on the playing message stops it."""
        if self.is_speaking(index):
            self.stop()
            return None
        return self.start(index, text)

    def stop(self) -> None:
        self.current = None


def _js_string(text: str) -> str:
    return json.dumps(text).replace("</", "<\\/")


def browser_speech_script(text: str | None) -> str:
    """JS for on-device speech; with text=None it only cancels playback."""
    script = "window.speechSynthesis && window.speechSynthesis.cancel();"
    if text:
        script += (
            f"const u = new SpeechSynthesisUtterance({_js_string(text)});"
            f"u.lang = {json.dumps(FALLBACK_LANG)}; u.rate = {FALLBACK_RATE}; u.pitch = 1; u.volume = 1;"
            "window.speechSynthesis.speak(u);"
        )
    return f"<script>{script}</script>"
