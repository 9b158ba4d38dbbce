"""Emoji API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map EmojiError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager,
      unless the caller injects its own session scope
    - The emoji plugin is installed before the app serves its first request

Design Decisions:
    - create_app() factory plus module-level `app`: uvicorn uses `app`,
      tests build isolated apps with injected store/session scope/event bus
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from emoji_plugin.api.error_handlers import register_error_handlers
from emoji_plugin.api.routes import emoji, health
from emoji_plugin.config import Settings, get_settings
from emoji_plugin.core.repository_protocols import BlobStore, EventBus
from emoji_plugin.host import HostApp
from emoji_plugin.infrastructure.database import init_db, session_scope as db_session_scope
from emoji_plugin.infrastructure.directory_emoji_set import DirectoryEmojiSet
from emoji_plugin.infrastructure.event_bus import InProcessEventBus
from emoji_plugin.infrastructure.observability import setup_logging
from emoji_plugin.plugin import emoji_plugin

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    store: BlobStore | None = None,
    session_scope=None,
    events: EventBus | None = None,
) -> FastAPI:
    """Build the FastAPI app with the emoji plugin installed."""
    settings = settings or get_settings()
    manage_db = session_scope is None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        db = None
        if manage_db:
            db = init_db(
                settings.database_url,
                pool_size=settings.database_pool_size,
                max_overflow=settings.database_max_overflow,
            )
        logger.info("Emoji API started")
        yield
        if db is not None:
            await db.dispose()
        logger.info("Emoji API shutting down")

    app = FastAPI(title="Emoji API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(emoji.router)
    register_error_handlers(app)

    host = HostApp(
        app=app,
        events=events or InProcessEventBus(),
        session_scope=session_scope or db_session_scope,
    )
    manager = emoji_plugin(
        store=store,
        path=settings.emoji_store_path,
        mount_path=settings.emoji_mount_path,
    )(host)
    for directory in settings.emoji_set_dirs:
        manager.use_emoji_set(DirectoryEmojiSet(directory))

    return app


app = create_app()
