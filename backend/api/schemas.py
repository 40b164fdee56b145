"""Pydantic models for the API layer.

Wire format is camelCase (what the chat client sends); attributes are
snake_case with aliases.
"""

import time
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


def _now_ms() -> int:
    return int(time.time() * 1000)


class ConversationMessage(BaseModel):
    """Single turn in a conversation transcript."""
    model_config = ConfigDict(populate_by_name=True)

    role: Literal["user", "assistant"]
    content: str
    image: str | None = None
    generated_image: str | None = Field(None, alias="generatedImage")
    icons: list[str] = Field(default_factory=list)
    timestamp: int = Field(default_factory=_now_ms, description="Epoch milliseconds")


class AnalysisRequest(BaseModel):
    """Incoming turn submission from the chat client."""
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field("", max_length=4000, description="User description of the problem")
    image: str | None = Field(None, description="Data URL or bare base64 photo")
    conversation_history: list[ConversationMessage] = Field(
        default_factory=list, alias="conversationHistory",
        description="Prior turns, oldest first, excluding the current message",
    )


class AnalysisResponse(BaseModel):
    """Finalized assistant turn returned to the client."""
    model_config = ConfigDict(populate_by_name=True)

    reply: str
    needs_image: bool = Field(False, alias="needsImage")
    is_solution: bool = Field(False, alias="isSolution")
    solution: list[str] | None = None
    icons: list[str] | None = None
    generated_image: str | None = Field(None, alias="generatedImage")

    def to_message(self) -> ConversationMessage:
        """Assistant transcript entry for this turn."""
        return ConversationMessage(
            role="assistant",
            content=self.reply,
            generated_image=self.generated_image,
            icons=self.icons or [],
        )


class ErrorResponse(BaseModel):
    """Error body for every failed request."""
    model_config = ConfigDict(populate_by_name=True)

    error: str
    retry_after: int | None = Field(None, alias="retryAfter")


class TTSRequest(BaseModel):
    """Text to read aloud."""
    text: str = Field(..., min_length=1, max_length=5000)


class TTSResponse(BaseModel):
    """Base64-encoded MP3 audio."""
    model_config = ConfigDict(populate_by_name=True)

    audio_content: str = Field(..., alias="audioContent")
