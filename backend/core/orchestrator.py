"""Turn protocol: history + new input -> Gemini -> normalized assistant turn.

The orchestrator is stateless. Content-shape problems are absorbed by the
extractor and image failures by the synthesizer; errors from the model call
itself propagate so the caller can classify them.
"""

import base64
import binascii
from collections.abc import Sequence

import structlog
from google.genai import types

from backend.agent.prompts import SYSTEM_PROMPT
from backend.api.schemas import AnalysisResponse, ConversationMessage
from backend.core.image_synthesizer import ImageSynthesizer
from backend.core.llm_adapter import ConfigurationError, LLMAdapter
from backend.core.response_extractor import extract_response

logger = structlog.get_logger(__name__)

USER_PREFIX = "Usuario"
ASSISTANT_PREFIX = "Asistente"
IMAGE_ONLY_PLACEHOLDER = "(te mandé una foto)"


class TurnValidationError(ValueError):
    """Malformed turn submission, rejected before any upstream call."""
    pass


def decode_image(payload: str) -> tuple[bytes, str]:
    """Split a data URL (or bare base64) into raw bytes and a mime type.

    PNG when the prefix says so, JPEG otherwise.

    Raises:
        TurnValidationError: If the payload is not valid base64.
    """
    prefix, sep, data = payload.partition(",")
    if not sep:
        prefix, data = "", payload
    mime_type = "image/png" if "image/png" in prefix else "image/jpeg"
    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise TurnValidationError("Image is not valid base64")
    if not raw:
        raise TurnValidationError("Image is empty")
    return raw, mime_type


def _image_part(payload: str) -> types.Part:
    raw, mime_type = decode_image(payload)
    return types.Part.from_bytes(data=raw, mime_type=mime_type)


def build_contents(
    message: str,
    image: str | None,
    history: Sequence[ConversationMessage],
) -> list[types.Part]:
    """Flatten history and the new input into ordered multimodal parts."""
    parts: list[types.Part] = []

    for entry in history:
        if entry.image:
            parts.append(_image_part(entry.image))
        prefix = USER_PREFIX if entry.role == "user" else ASSISTANT_PREFIX
        parts.append(types.Part.from_text(text=f"{prefix}: {entry.content}"))

    if image:
        parts.append(_image_part(image))
    parts.append(types.Part.from_text(text=f"{USER_PREFIX}: {message or IMAGE_ONLY_PLACEHOLDER}"))
    return parts


class ConversationOrchestrator:
    """Runs one assistant turn end to end."""

    def __init__(self, llm_adapter: LLMAdapter, image_synthesizer: ImageSynthesizer | None = None,
                 system_prompt: str = SYSTEM_PROMPT):
        self.llm_adapter = llm_adapter
        self.image_synthesizer = image_synthesizer
        self.system_prompt = system_prompt

    def handle_turn(
        self,
        message: str | None,
        image: str | None = None,
        history: Sequence[ConversationMessage] = (),
    ) -> AnalysisResponse:
        """Process one user turn.

        Args:
            message: User text; may be blank only when an image is attached.
            image: Optional data URL / base64 photo.
            history: Prior turns, oldest first, excluding this message.

        Returns:
            The finalized assistant turn.

        Raises:
            TurnValidationError: Blank message without image, non-sequence
                history, or undecodable image.
            ConfigurationError: GEMINI_API_KEY is not configured.
            Exception: Whatever the model call raised (quota, network, auth).
        """
        message = (message or "").strip()
        if not message and not image:
            raise TurnValidationError("Message not provided")
        if not isinstance(history, (list, tuple)):
            raise TurnValidationError("Conversation history must be an array")
        if not self.llm_adapter.is_healthy():
            raise ConfigurationError("API key not configured")

        contents = build_contents(message, image, history)
        logger.info("turn.request", history_len=len(history), has_image=bool(image),
                    msg_len=len(message))

        raw_text = self.llm_adapter.generate(contents, system_instruction=self.system_prompt)
        schema = extract_response(raw_text)

        generated_image = None
        if schema.generate_image and self.image_synthesizer is not None:
            generated_image = self.image_synthesizer.synthesize(schema.generate_image)

        response = AnalysisResponse(
            reply=schema.reply,
            needs_image=schema.needs_image,
            is_solution=schema.is_solution,
            solution=schema.solution,
            icons=schema.icons,
            generated_image=generated_image,
        )

        logger.info("turn.response", needs_image=response.needs_image,
                    is_solution=response.is_solution, icons=response.icons or [],
                    generated_image=generated_image is not None)
        return response
