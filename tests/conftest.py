"""Shared fixtures for all tests."""

import base64
from unittest.mock import MagicMock

import pytest

from backend.api.schemas import ConversationMessage

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-png-body"
JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg-body"


@pytest.fixture
def png_data_url() -> str:
    return "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()


@pytest.fixture
def jpeg_data_url() -> str:
    return "data:image/jpeg;base64," + base64.b64encode(JPEG_BYTES).decode()


@pytest.fixture
def sample_history(png_data_url) -> list[ConversationMessage]:
    """Three-turn transcript; the first user turn carries a photo."""
    return [
        ConversationMessage(role="user", content="No anda el wifi", image=png_data_url),
        ConversationMessage(role="assistant", content="¿Ves el dibujito del wifi tachado?",
                            icons=["wifiOff"]),
        ConversationMessage(role="user", content="Sí, está tachado"),
    ]


@pytest.fixture
def mock_llm_adapter():
    """Healthy adapter whose generate() returns a plain JSON question."""
    adapter = MagicMock()
    adapter.is_healthy.return_value = True
    adapter.generate.return_value = '{"reply": "¿Probaste apagar y prender el router?", "needsImage": false}'
    return adapter

