"""Best-effort decoding of Gemini replies into the assistant response schema.

The model is told to answer with a single JSON object, but it drifts: prose
before the object, markdown fences, truncated output. Each strategy below is a
total function ``str -> ResponseSchema | None`` tried in priority order, and
the last one always produces a value, so extraction never raises.
"""

import json
import re

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

logger = structlog.get_logger(__name__)

FALLBACK_REPLY = "No pude procesar la respuesta. ¿Podés repetir?"


class ResponseSchema(BaseModel):
    """One normalized assistant turn as produced by the model."""
    model_config = ConfigDict(populate_by_name=True)

    reply: str = Field(..., min_length=1)
    needs_image: bool = Field(False, alias="needsImage")
    is_solution: bool = Field(False, alias="isSolution")
    solution: list[str] | None = None
    icons: list[str] | None = None
    generate_image: str | None = Field(None, alias="generateImage")

    @field_validator("reply")
    @classmethod
    def _strip_reply(cls, value: str) -> str:
        return value.strip()

    @field_validator("icons")
    @classmethod
    def _dedupe_icons(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        return list(dict.fromkeys(v.strip() for v in value if v.strip()))

    @field_validator("generate_image")
    @classmethod
    def _blank_directive_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @model_validator(mode="after")
    def _solution_only_when_solved(self) -> "ResponseSchema":
        if not self.is_solution:
            self.solution = None
        return self


def _has_reply(data) -> bool:
    return isinstance(data, dict) and isinstance(data.get("reply"), str) and bool(data["reply"].strip())


def _coerce(data) -> ResponseSchema | None:
    """Build a schema from a parsed object, keeping only its reply if the rest is ill-typed."""
    if not _has_reply(data):
        return None
    try:
        return ResponseSchema.model_validate(data)
    except ValidationError as e:
        logger.warning("extract.partial_schema", errors=e.error_count())
        return ResponseSchema(reply=data["reply"])


def _parse(text: str) -> ResponseSchema | None:
    try:
        data = json.loads(text.strip())
    except ValueError:
        return None
    return _coerce(data)


_JSON_FENCE = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)
_ANY_FENCE = re.compile(r"```\s*([\s\S]*?)\s*```")
_LOOSE_OBJECT = re.compile(r"\{[\s\S]*\"reply\"[\s\S]*\}")
_REPLY_VALUE = re.compile(r"\"reply\"\s*:\s*\"((?:[^\"\\]|\\.)*)\"")


def _from_whole_text(raw: str) -> ResponseSchema | None:
    return _parse(raw)


def _from_json_fence(raw: str) -> ResponseSchema | None:
    match = _JSON_FENCE.search(raw)
    return _parse(match.group(1)) if match else None


def _from_any_fence(raw: str) -> ResponseSchema | None:
    match = _ANY_FENCE.search(raw)
    return _parse(match.group(1)) if match else None


def _from_embedded_object(raw: str) -> ResponseSchema | None:
    match = _LOOSE_OBJECT.search(raw)
    if match:
        parsed = _parse(match.group(0))
        if parsed:
            return parsed

    # The loose match swallows trailing prose braces; decode from each "{" instead.
    decoder = json.JSONDecoder()
    start = raw.find("{")
    while start != -1:
        try:
            data, _ = decoder.raw_decode(raw, start)
        except ValueError:
            data = None
        parsed = _coerce(data)
        if parsed:
            return parsed
        start = raw.find("{", start + 1)
    return None


def _from_reply_literal(raw: str) -> ResponseSchema | None:
    match = _REPLY_VALUE.search(raw)
    if not match:
        return None
    value = match.group(1)
    try:
        value = json.loads(f'"{value}"')
    except ValueError:
        pass
    if not value.strip():
        return None
    return ResponseSchema(reply=value, needs_image=False, is_solution=False)


_SCAFFOLDING = [
    re.compile(r"```json\s*", re.IGNORECASE),
    re.compile(r"```\s*"),
    re.compile(r"^\s*\{\s*\"reply\"\s*:\s*\"", re.MULTILINE),
    re.compile(r"\"\s*,?\s*\"(needsImage|isSolution|solution|icons|generateImage)\"[\s\S]*$", re.MULTILINE),
]


def _from_residue(raw: str) -> ResponseSchema:
    cleaned = raw
    for pattern in _SCAFFOLDING:
        cleaned = pattern.sub("", cleaned)
    cleaned = cleaned.strip()
    return ResponseSchema(reply=cleaned or FALLBACK_REPLY, needs_image=False, is_solution=False)


_STRUCTURED_STRATEGIES = [
    ("whole_text", _from_whole_text),
    ("json_fence", _from_json_fence),
    ("any_fence", _from_any_fence),
    ("embedded_object", _from_embedded_object),
]


def extract_response(raw_text: str | None) -> ResponseSchema:
    """Turn raw model output into a ResponseSchema. Never raises.

    Args:
        raw_text: Text returned by the language model (may be None or empty).

    Returns:
        The first schema a strategy produces, or a degraded reply-only schema.
    """
    raw = raw_text or ""

    for name, strategy in _STRUCTURED_STRATEGIES:
        result = strategy(raw)
        if result is not None:
            logger.debug("extract.ok", strategy=name)
            return result

    literal = _from_reply_literal(raw)
    if literal is not None:
        logger.warning("extract.fallback", strategy="reply_literal", raw_len=len(raw))
        return literal

    logger.warning("extract.fallback", strategy="residue", raw_len=len(raw))
    return _from_residue(raw)
