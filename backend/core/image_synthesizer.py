"""On-demand reference illustrations for assistant replies.

Image generation is an enhancement: every failure is logged and turned into
None, never raised into the conversation turn.
"""

import base64

import structlog

from backend.agent.prompts import build_image_prompt
from backend.core.llm_adapter import LLMAdapter

logger = structlog.get_logger(__name__)


class ImageSynthesizer:
    """Generates a single-icon reference image from a short description."""

    def __init__(self, llm_adapter: LLMAdapter):
        self.llm_adapter = llm_adapter

    def synthesize(self, description: str) -> str | None:
        """Request an illustration and return it as a data URL.

        Args:
            description: Short description of the icon/button to draw.

        Returns:
            "data:<mime>;base64,<data>" for the first inline image, or None.
        """
        if not description or not description.strip():
            return None

        try:
            response = self.llm_adapter.generate_image(build_image_prompt(description))
            image = _first_inline_image(response)
        except Exception as e:
            logger.error("image.failed", error=str(e)[:300])
            return None

        if image is None:
            logger.warning("image.no_inline_data", description=description[:80])
            return None

        logger.info("image.ok", description=description[:80])
        return image


def _first_inline_image(response) -> str | None:
    """Pick the first inline image part of the first candidate."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None

    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        if inline is None or not inline.data:
            continue
        data = inline.data
        if isinstance(data, bytes):
            data = base64.b64encode(data).decode("utf-8")
        mime_type = inline.mime_type or "image/png"
        return f"data:{mime_type};base64,{data}"
    return None
