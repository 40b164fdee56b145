"""FastAPI endpoints for the El Nieto Tech API.

POST /api/analyze - run one conversation turn
POST /api/tts - synthesize speech for a reply
GET /health - component health check
"""

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from backend.api.schemas import AnalysisRequest, AnalysisResponse, ErrorResponse, TTSRequest, TTSResponse
from backend.core.failure_classifier import classify
from backend.core.llm_adapter import ConfigurationError
from backend.core.orchestrator import TurnValidationError
from backend.core.speech import SpeechError

logger = structlog.get_logger(__name__)

router = APIRouter()


def _error(status_code: int, error: str, retry_after: int | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, retry_after=retry_after)
    headers = {"Retry-After": str(retry_after)} if retry_after is not None else None
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=headers,
    )


@router.post(
    "/api/analyze",
    response_model=AnalysisResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def analyze(request: AnalysisRequest, req: Request):
    """Validate -> orchestrate -> classify any upstream failure."""
    orchestrator = req.app.state.orchestrator

    logger.info("analyze.request", msg_len=len(request.message),
                history_len=len(request.conversation_history), has_image=bool(request.image))

    try:
        return orchestrator.handle_turn(
            request.message,
            image=request.image,
            history=request.conversation_history,
        )
    except TurnValidationError as e:
        logger.warning("analyze.invalid", reason=str(e))
        return _error(400, str(e))
    except ConfigurationError as e:
        logger.error("analyze.not_configured", error=str(e))
        return _error(500, "API key not configured")
    except Exception as e:
        result = classify(e)
        if result.is_rate_limit:
            return _error(429, "rate_limit", retry_after=result.retry_after_seconds)
        logger.error("analyze.upstream_failed", error=str(e)[:300])
        return _error(500, "general")


@router.post("/api/tts", response_model=TTSResponse, responses={400: {"model": ErrorResponse}})
def tts(request: TTSRequest, req: Request):
    """Read a reply aloud via Google Cloud TTS."""
    if not request.text.strip():
        return _error(400, "Text is required")

    try:
        audio = req.app.state.speech.synthesize(request.text)
    except SpeechError as e:
        return _error(e.status_code, e.detail)

    return TTSResponse(audio_content=audio)


@router.get("/health")
def health(req: Request):
    """Check which upstream credentials are configured."""
    components = {
        "gemini": "ok" if req.app.state.llm_adapter.is_healthy() else "error",
        "tts": "ok" if req.app.state.speech.is_healthy() else "error",
    }

    errors = [k for k, v in components.items() if v == "error"]
    if not errors:
        status = "healthy"
    elif len(errors) == len(components):
        status = "unhealthy"
    else:
        status = "degraded"

    return {"status": status, "components": components}


@router.get("/")
@router.head("/")
def root_health():
    """Basic root health check for deployment platforms."""
    return {"status": "ok", "service": "nieto-tech-api"}
