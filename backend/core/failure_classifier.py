"""Classify upstream Gemini failures into rate-limit vs. general errors.

The SDK surfaces throttling inconsistently: sometimes as a structured 429,
sometimes only as prose in the message. Errors are normalized into an
ErrorDescription and run through a list of predicates; any hit means
rate limit.
"""

import json
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Literal

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_RETRY_SECONDS = 60

_RATE_LIMIT_TOKENS = ("429", "too many requests", "quota", "resource_exhausted")
_RETRY_HINT = re.compile(r"retry in (\d+(?:\.\d+)?)", re.IGNORECASE)
_STATUS_ATTRS = ("status_code", "code", "status")


@dataclass(frozen=True)
class ErrorDescription:
    """Normalized view of an arbitrary error object."""
    status: int | None
    message: str
    serialized: str


@dataclass(frozen=True)
class Classification:
    """Outcome of classify(). retry_after_seconds is set only for rate limits."""
    kind: Literal["rate_limit", "general"]
    retry_after_seconds: int | None = None

    @property
    def is_rate_limit(self) -> bool:
        return self.kind == "rate_limit"


def _get(source: Any, name: str) -> Any:
    if isinstance(source, dict):
        return source.get(name)
    return getattr(source, name, None)


def _as_status(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def _find_status(error: Any) -> int | None:
    for name in _STATUS_ATTRS:
        status = _as_status(_get(error, name))
        if status is not None:
            return status
    response = _get(error, "response")
    if response is not None:
        return _as_status(_get(response, "status_code"))
    return None


def _serialize(error: Any) -> str:
    if isinstance(error, dict):
        attrs = error
    else:
        try:
            attrs = {k: v for k, v in vars(error).items() if not k.startswith("_")}
        except TypeError:
            return repr(error)
    try:
        return json.dumps(attrs, default=str)
    except (TypeError, ValueError):
        return repr(attrs)


def describe(error: Any) -> ErrorDescription:
    """Normalize an exception (or error dict) into status, message and serialization."""
    message = _get(error, "message")
    if not isinstance(message, str):
        message = "" if error is None else str(error)
    return ErrorDescription(
        status=_find_status(error),
        message=message,
        serialized=_serialize(error),
    )


def _has_429_status(desc: ErrorDescription) -> bool:
    return desc.status == 429


def _message_mentions_throttling(desc: ErrorDescription) -> bool:
    lowered = desc.message.lower()
    return any(token in lowered for token in _RATE_LIMIT_TOKENS)


def _mentions_rate(desc: ErrorDescription) -> bool:
    return "rate" in f"{desc.serialized} {desc.message}".lower()


RATE_LIMIT_PREDICATES: list[tuple[str, Callable[[ErrorDescription], bool]]] = [
    ("status_429", _has_429_status),
    ("message_token", _message_mentions_throttling),
    ("mentions_rate", _mentions_rate),
]


def retry_after_seconds(message: str) -> int:
    """Seconds to wait, from a 'retry in N' hint (rounded up) or the 60s default."""
    match = _RETRY_HINT.search(message or "")
    if match:
        return math.ceil(float(match.group(1)))
    return DEFAULT_RETRY_SECONDS


def classify(error: Any) -> Classification:
    """Classify an upstream failure.

    Args:
        error: Exception raised by the model call, or a dict carrying
            status/message fields.

    Returns:
        Classification(kind="rate_limit", retry_after_seconds=N) or
        Classification(kind="general").
    """
    desc = describe(error)

    for name, predicate in RATE_LIMIT_PREDICATES:
        if predicate(desc):
            seconds = retry_after_seconds(desc.message)
            logger.warning("classify.rate_limit", matched=name, status=desc.status,
                           retry_after=seconds)
            return Classification(kind="rate_limit", retry_after_seconds=seconds)

    logger.info("classify.general", status=desc.status, error=desc.message[:200])
    return Classification(kind="general")
