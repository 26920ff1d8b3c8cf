"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from safetybot import __version__
from safetybot.config import Settings, get_settings
from safetybot.dependencies import get_app_settings, require_basic_auth
from safetybot.knowledge import KnowledgeStore
from safetybot.knowledge import router as knowledge_router
from safetybot.search import KnowledgeSearch
from safetybot.chat import ChatError, ContextFormatter, HealthResponse, PromptDispatcher
from safetybot.chat import router as chat_router
from safetybot.chat.providers import LLMProvider

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    settings: Settings = app.state.settings
    configure_logging(settings)
    logger.info("Starting %s...", settings.app_name)

    if app.state.store is None:
        app.state.store = KnowledgeStore.load(
            settings.knowledge_path, settings.cases_path, settings.laws_path
        )
        app.state.search = KnowledgeSearch.from_settings(app.state.store, settings)

    logger.info("AI provider: %s", settings.ai_provider)
    if settings.api_configured:
        logger.info("API key configured")
    else:
        logger.warning("API key missing: chat requests will fail until it is set")
    if settings.basic_auth_enabled:
        logger.info("Basic authentication enabled")

    yield

    # Shutdown
    logger.info("Shutting down...")


def create_app(
    settings: Settings | None = None,
    store: KnowledgeStore | None = None,
    provider: LLMProvider | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use instead of the environment.
        store: Pre-built knowledge store; loaded from ``settings`` paths if omitted.
        provider: Pre-built LLM adapter; built from ``settings`` on first chat if omitted.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Occupational safety Q&A chatbot backed by a keyword-searched knowledge base",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.search = KnowledgeSearch.from_settings(store, settings) if store is not None else None
    app.state.formatter = ContextFormatter(law_summary_chars=settings.law_summary_chars)
    app.state.dispatcher = PromptDispatcher(settings, provider=provider)

    # CORS middleware - configurable via CORS_ORIGINS env var
    cors_origins = settings.cors_origins.split(",") if settings.cors_origins != "*" else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ChatError)
    async def chat_error_handler(request: Request, exc: ChatError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    auth = [Depends(require_basic_auth)]
    app.include_router(chat_router, dependencies=auth)       # /api/chat
    app.include_router(knowledge_router, dependencies=auth)  # /api/knowledge

    @app.get("/api/health", response_model=HealthResponse, dependencies=auth)
    async def health(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
        """Report the configured provider and whether its API key is present."""
        return HealthResponse(
            status="ok",
            provider=settings.ai_provider,
            api_configured=settings.api_configured,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=3000)
