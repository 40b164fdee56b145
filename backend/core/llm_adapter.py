"""Gemini adapter built on the google-genai SDK.

One client serves both the conversational text model and the image model.
Upstream errors (quota, auth, network) are logged and re-raised untouched so
the API layer can classify them; nothing here retries.
"""

import os

import structlog
from google import genai
from google.genai import types

logger = structlog.get_logger(__name__)


class ConfigurationError(Exception):
    """The Gemini API key is not configured."""
    pass


class LLMAdapter:
    """Wraps the google-genai client for text and image generation."""

    def __init__(self):
        self.api_key = os.environ.get("GEMINI_API_KEY", "")

        self.model_name = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")
        self.image_model_name = os.environ.get("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image")

        self.temperature = float(os.environ.get("LLM_TEMPERATURE", "0.7"))
        # Unset means no cap; on 2.5 models thinking tokens count against it
        max_tokens = os.environ.get("LLM_MAX_TOKENS")
        self.max_tokens = int(max_tokens) if max_tokens else None
        self.timeout = int(os.environ.get("LLM_TIMEOUT", "60"))

        self._client: genai.Client | None = None

    def is_healthy(self) -> bool:
        """Check that an API key is configured.

        Returns:
            True if GEMINI_API_KEY is set.
        """
        return bool(self.api_key)

    def _get_client(self) -> genai.Client:
        """Lazily build the SDK client so a missing key does not break startup."""
        if not self.api_key:
            raise ConfigurationError("GEMINI_API_KEY environment variable is not set.")
        if self._client is None:
            self._client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(timeout=self.timeout * 1000),
            )
        return self._client

    def generate(self, contents: list[types.Part], system_instruction: str) -> str:
        """Run one multimodal turn against the text model.

        Args:
            contents: Ordered image/text parts (history first, current message last).
            system_instruction: Persona prompt.

        Returns:
            The raw text of the response (may be empty).

        Raises:
            ConfigurationError: If no API key is configured.
            Exception: Any SDK error, unchanged, for upstream classification.
        """
        client = self._get_client()
        logger.debug("llm.generate", model=self.model_name, parts=len(contents))

        try:
            response = client.models.generate_content(
                model=self.model_name,
                contents=contents,
                config=types.GenerateContentConfig(
                    system_instruction=system_instruction,
                    temperature=self.temperature,
                    max_output_tokens=self.max_tokens,
                ),
            )
        except Exception as e:
            logger.error("llm.generate_failed", model=self.model_name, error=str(e)[:300])
            raise

        text = response.text or ""
        logger.info("llm.generate_ok", model=self.model_name, chars=len(text))
        return text

    def generate_image(self, prompt: str) -> types.GenerateContentResponse:
        """Ask the image model for an illustration.

        Args:
            prompt: Fully templated image prompt.

        Returns:
            Raw SDK response; callers pick the inline image part out of it.
        """
        client = self._get_client()
        logger.debug("llm.generate_image", model=self.image_model_name)

        return client.models.generate_content(
            model=self.image_model_name,
            contents=prompt,
            config=types.GenerateContentConfig(response_modalities=["IMAGE"]),
        )
