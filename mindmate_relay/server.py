"""
FastAPI server for the MindMate Relay service.

This module implements the HTTP API: the chat relay, mood check-in storage,
mood history and mood summary endpoints. Internal failures are logged with
detail and reported to the caller as ``{"error": <generic message>}``.
"""

import logging
import time
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import Settings, configure_logging
from .errors import ConfigurationError, UpstreamError, ValidationError
from .kv import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore
from .llm import AnthropicClient
from .models import ChatTurn, MoodEntry, MoodSummary
from .relay import ConversationRelay
from .store import MoodJournal

logger = logging.getLogger(__name__)

DEFAULT_USER_ID = "guest"
INVALID_USER_ID = "User id must be non-empty and must not contain ':'"


# API Request/Response Schemas
class ChatPayload(BaseModel):
    """Payload for chat requests."""

    model_config = ConfigDict(populate_by_name=True)

    message: str | None = Field(None, description="The user's new message")
    conversation_history: list[ChatTurn] | None = Field(
        None, alias="conversationHistory", description="Prior turns, oldest first"
    )


class ChatResponse(BaseModel):
    """Response model for the chat endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., description="The model's reply")
    conversation_id: str = Field(..., alias="conversationId")


class MoodPayload(BaseModel):
    """Payload for mood check-in requests."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(DEFAULT_USER_ID, alias="userId")
    mood: str | None = Field(None, description="The mood being reported")
    note: str | None = Field(None, description="Optional free-text note")


class SaveMoodResponse(BaseModel):
    """Response model for mood check-ins."""

    success: bool
    message: str


class MoodHistoryResponse(BaseModel):
    """Response model for mood history, newest first."""

    moods: list[MoodEntry]


class MoodSummaryResponse(BaseModel):
    """Response model for mood analytics."""

    summary: MoodSummary


def create_app(journal: MoodJournal, relay: ConversationRelay) -> FastAPI:
    """
    Create a FastAPI application with the given collaborators.

    Args:
        journal: The MoodJournal used for mood storage and history
        relay: The ConversationRelay used for chat

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Lifespan context manager for FastAPI application."""
        logger.info("MindMate Relay starting")
        yield
        logger.info("MindMate Relay stopped")

    app = FastAPI(
        title="MindMate Relay",
        description="Chat relay and mood journal for a wellness companion",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_headers=["Content-Type", "Authorization"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        expose_headers=["Content-Length"],
        max_age=600,
    )

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms"
        )
        return response

    # MARK: - Error rendering

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info(f"Rejected request body on {request.url.path}: {exc.errors()}")
        return JSONResponse({"error": "Invalid request body"}, status_code=400)

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    # MARK: - Routes

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok"}

    @app.post("/chat")
    async def chat(payload: ChatPayload) -> ChatResponse:
        """
        Relay a message and its history to the completion service.

        Returns:
            The model's reply and the model-supplied conversation id
        """
        try:
            completion = await relay.relay(
                payload.message, payload.conversation_history or []
            )
        except ValidationError:
            raise HTTPException(status_code=400, detail="Message is required")
        except ConfigurationError:
            raise HTTPException(status_code=500, detail="Claude API key not configured")
        except UpstreamError:
            raise HTTPException(
                status_code=500, detail="Failed to get response from Claude AI"
            )
        except Exception as e:
            logger.error(f"Error in chat endpoint: {e}")
            raise HTTPException(
                status_code=500, detail="Internal server error during chat processing"
            )

        return ChatResponse(message=completion.text, conversation_id=completion.id)

    @app.post("/mood")
    async def save_mood(payload: MoodPayload) -> SaveMoodResponse:
        """Store a mood check-in."""
        try:
            await journal.save(payload.user_id, payload.mood, payload.note)
        except ValidationError as e:
            detail = "Mood is required" if e.field == "mood" else INVALID_USER_ID
            raise HTTPException(status_code=400, detail=detail)
        except Exception as e:
            logger.error(f"Error saving mood: {e}")
            raise HTTPException(status_code=500, detail="Failed to save mood")

        return SaveMoodResponse(success=True, message="Mood saved successfully")

    @app.get("/mood/history/{user_id}")
    async def mood_history(user_id: str) -> MoodHistoryResponse:
        """Fetch a user's mood entries, newest first."""
        try:
            moods = await journal.history(user_id)
        except ValidationError:
            raise HTTPException(status_code=400, detail=INVALID_USER_ID)
        except Exception as e:
            logger.error(f"Error fetching mood history: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch mood history")

        return MoodHistoryResponse(moods=moods)

    @app.get("/mood/summary/{user_id}")
    async def mood_summary(user_id: str) -> MoodSummaryResponse:
        """Derive trend, average, distribution and timeline for a user."""
        try:
            summary = await journal.summary(user_id)
        except ValidationError:
            raise HTTPException(status_code=400, detail=INVALID_USER_ID)
        except Exception as e:
            logger.error(f"Error computing mood summary: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch mood summary")

        return MoodSummaryResponse(summary=summary)

    return app


def build_kv_store(settings: Settings) -> KeyValueStore:
    """Pick the key-value backend named by the settings."""
    if settings.store_path:
        return JsonFileKeyValueStore(settings.store_path)
    return InMemoryKeyValueStore()


def build_app(settings: Settings) -> FastAPI:
    """Wire the production collaborators from settings into an app."""
    client = AnthropicClient(
        model=settings.model,
        max_tokens=settings.max_tokens,
        api_url=settings.api_url,
        timeout=settings.llm_timeout,
    )
    relay = ConversationRelay(
        client, settings.api_key, max_history_turns=settings.max_history_turns
    )
    journal = MoodJournal(build_kv_store(settings))
    return create_app(journal, relay)


def get_app() -> FastAPI:
    """App factory for uvicorn: read settings and configure logging, then build."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    return build_app(settings)


def main() -> None:
    """Main entry point for the server."""
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(
        "mindmate_relay.server:get_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
