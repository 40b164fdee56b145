"""Client-side turn protocol for the chat screen.

Kept free of Streamlit so it can be unit tested; the app stores one
ConversationStateMachine in st.session_state and drives it from UI events.

Every optimistic user turn is matched by an assistant append or a rollback,
so the visible transcript never shows a user message whose turn failed.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

import structlog

logger = structlog.get_logger(__name__)


class TurnState(str, Enum):
    IDLE = "idle"
    AWAITING = "awaiting-response"
    COOLDOWN = "cooldown"


class ErrorKind(str, Enum):
    RATE_LIMIT = "rate_limit"
    GENERAL = "general"
    CONNECTION = "connection"


ERROR_MESSAGES = {
    ErrorKind.RATE_LIMIT: "Estoy atendiendo muchas consultas. Esperá {seconds} segundos y probá de nuevo.",
    ErrorKind.GENERAL: "No se pudo procesar tu mensaje. Por favor, intentá de nuevo.",
    ErrorKind.CONNECTION: "No hay conexión. Revisá que tengas internet y probá de nuevo.",
}


@dataclass(frozen=True)
class ErrorState:
    """Client-visible failure. retry_after_seconds is only set for rate limits."""
    kind: ErrorKind
    retry_after_seconds: int | None = None

    @classmethod
    def rate_limit(cls, seconds: int) -> "ErrorState":
        return cls(ErrorKind.RATE_LIMIT, max(1, int(seconds)))

    @classmethod
    def general(cls) -> "ErrorState":
        return cls(ErrorKind.GENERAL)

    @classmethod
    def connection(cls) -> "ErrorState":
        return cls(ErrorKind.CONNECTION)


@dataclass(frozen=True)
class PendingTurn:
    """What gets sent upstream. history excludes the message being sent."""
    message: str
    image: str | None
    history: list[dict]


def _message(role: str, content: str, **extra) -> dict:
    msg = {"role": role, "content": content, "timestamp": int(time.time() * 1000)}
    msg.update({k: v for k, v in extra.items() if v})
    return msg


@dataclass
class ConversationStateMachine:
    messages: list[dict] = field(default_factory=list)
    state: TurnState = TurnState.IDLE
    seconds_remaining: int = 0
    error: ErrorState | None = None
    needs_photo: bool = False

    @property
    def can_submit(self) -> bool:
        return self.state == TurnState.IDLE

    def error_message(self) -> str | None:
        """Localized banner text for the current error, if any."""
        if self.error is None:
            return None
        seconds = self.seconds_remaining if self.state == TurnState.COOLDOWN else self.error.retry_after_seconds
        return ERROR_MESSAGES[self.error.kind].format(seconds=seconds)

    def submit(self, text: str, image: str | None = None) -> PendingTurn | None:
        """Optimistically append the user turn. Returns None when rejected."""
        text = (text or "").strip()
        if not self.can_submit or (not text and not image):
            return None

        history = list(self.messages)
        self.messages.append(_message("user", text, image=image))
        self.state = TurnState.AWAITING
        self.error = None
        self.needs_photo = False
        return PendingTurn(message=text, image=image, history=history)

    def resolve(self, response: dict) -> None:
        """Record the assistant reply for the in-flight turn."""
        if self.state != TurnState.AWAITING:
            return
        self.messages.append(_message(
            "assistant",
            response.get("reply", ""),
            icons=response.get("icons"),
            generatedImage=response.get("generatedImage"),
            solution=response.get("solution") if response.get("isSolution") else None,
        ))
        self.needs_photo = bool(response.get("needsImage"))
        self.state = TurnState.IDLE

    def fail(self, error: ErrorState) -> None:
        """Roll back the optimistic user turn and surface the error."""
        if self.state != TurnState.AWAITING:
            return
        if self.messages and self.messages[-1]["role"] == "user":
            self.messages.pop()

        self.error = error
        if error.kind == ErrorKind.RATE_LIMIT:
            self.state = TurnState.COOLDOWN
            self.seconds_remaining = error.retry_after_seconds or 0
            if self.seconds_remaining <= 0:
                self._end_cooldown()
        else:
            self.state = TurnState.IDLE

    def tick(self) -> None:
        """Advance the cooldown countdown by one second."""
        if self.state != TurnState.COOLDOWN:
            return
        self.seconds_remaining = max(0, self.seconds_remaining - 1)
        if self.seconds_remaining == 0:
            self._end_cooldown()

    def dismiss_error(self) -> None:
        """Close the error banner. A running countdown cannot be dismissed."""
        if self.state != TurnState.COOLDOWN:
            self.error = None

    def reset(self) -> None:
        """Start a new conversation."""
        if self.state == TurnState.AWAITING:
            return
        self.messages.clear()
        self.needs_photo = False
        if self.state != TurnState.COOLDOWN:
            self.error = None

    def run_turn(self, text: str, image: str | None,
                 send: Callable[[PendingTurn], "dict | ErrorState"]) -> bool:
        """Submit, send and settle one turn. send() is not called when rejected.

        Returns:
            True if the assistant turn was appended.
        """
        pending = self.submit(text, image)
        if pending is None:
            return False

        try:
            outcome = send(pending)
        except Exception:
            logger.exception("turn.send_failed")
            outcome = ErrorState.general()
        if isinstance(outcome, ErrorState):
            self.fail(outcome)
            return False

        self.resolve(outcome)
        return True

    def _end_cooldown(self) -> None:
        self.state = TurnState.IDLE
        self.seconds_remaining = 0
        self.error = None
