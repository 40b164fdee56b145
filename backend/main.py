"""FastAPI application entry point.

Startup sequence: load .env -> init Gemini adapter -> image synthesizer ->
orchestrator -> TTS client.
"""

import os
from contextlib import asynccontextmanager

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from backend.api.routes import router
from backend.core.image_synthesizer import ImageSynthesizer
from backend.core.llm_adapter import LLMAdapter
from backend.core.orchestrator import ConversationOrchestrator
from backend.core.speech import TextToSpeechClient

load_dotenv()

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("startup.begin")

    llm_adapter = LLMAdapter()
    app.state.llm_adapter = llm_adapter
    if not llm_adapter.is_healthy():
        # Turns will be rejected with a configuration error until this is fixed
        logger.error("startup.llm_not_configured", hint="Set GEMINI_API_KEY in .env")
    else:
        logger.info("startup.llm_initialized", model=llm_adapter.model_name)

    app.state.orchestrator = ConversationOrchestrator(llm_adapter, ImageSynthesizer(llm_adapter))

    speech = TextToSpeechClient()
    app.state.speech = speech
    logger.info("startup.tts_initialized", healthy=speech.is_healthy())

    logger.info("startup.complete")
    yield
    logger.info("shutdown.complete")


app = FastAPI(
    title="El Nieto Tech API",
    description="Conversational tech support for elderly users",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.environ.get("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are a 400 with a short {"error": ...} message."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request")
    logger.warning("request.invalid", path=request.url.path, loc=location, error=message)
    return JSONResponse(
        status_code=400,
        content={"error": f"{location}: {message}" if location else message},
    )


app.include_router(router)
