"""HTTP calls from the Streamlit client to the backend.

Turn failures are mapped to ErrorState here; the state machine never sees a
requests exception.
"""

import os

import requests

from frontend.state import ErrorState, PendingTurn

API_URL = os.environ.get("API_URL", "http://localhost:8000")
ANALYZE_ENDPOINT = f"{API_URL}/api/analyze"
TTS_ENDPOINT = f"{API_URL}/api/tts"
HEALTH_ENDPOINT = f"{API_URL}/health"

DEFAULT_RETRY_SECONDS = 60


def _retry_after(resp: requests.Response) -> int:
    try:
        body = resp.json()
    except ValueError:
        body = {}
    value = body.get("retryAfter") if isinstance(body, dict) else None
    if value is None:
        value = resp.headers.get("Retry-After")
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_RETRY_SECONDS


def post_turn(pending: PendingTurn, timeout: float = 90) -> dict | ErrorState:
    """Send one turn. Returns the reply dict, or the ErrorState to surface."""
    try:
        resp = requests.post(
            ANALYZE_ENDPOINT,
            json={
                "message": pending.message,
                "image": pending.image,
                "conversationHistory": pending.history,
            },
            timeout=timeout,
        )
    except (requests.ConnectionError, requests.Timeout):
        return ErrorState.connection()
    except requests.RequestException:
        return ErrorState.general()

    if resp.status_code == 429:
        return ErrorState.rate_limit(_retry_after(resp))
    if resp.status_code != 200:
        return ErrorState.general()

    try:
        data = resp.json()
    except ValueError:
        return ErrorState.general()
    if not isinstance(data, dict) or not data.get("reply"):
        return ErrorState.general()
    return data


def fetch_speech(text: str, timeout: float = 20) -> str | None:
    """Base64 MP3 for text, or None so the caller can use browser speech."""
    try:
        resp = requests.post(TTS_ENDPOINT, json={"text": text}, timeout=timeout)
    except requests.RequestException:
        return None
    if resp.status_code != 200:
        return None
    try:
        return resp.json().get("audioContent") or None
    except ValueError:
        return None


def check_health(timeout: float = 3) -> str:
    """Backend health status string, or "offline"."""
    try:
        return requests.get(HEALTH_ENDPOINT, timeout=timeout).json().get("status", "unknown")
    except (requests.RequestException, ValueError):
        return "offline"
