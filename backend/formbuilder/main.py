"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from formbuilder.config import Settings, get_settings
from formbuilder.exceptions import PersistenceError
from formbuilder.routers import builder, forms, preview
from formbuilder.services.persistence import SqlAlchemyGateway
from formbuilder.services.store import FormStore

logger = logging.getLogger(__name__)


def _default_store(settings: Settings) -> FormStore:
    return FormStore(SqlAlchemyGateway.from_url(settings.database_url), settings=settings)


def create_app(
    settings: Optional[Settings] = None,
    store_factory: Optional[Callable[[Settings], FormStore]] = None
) -> FastAPI:
    """Build the application; the form store lives for the app's lifespan."""
    settings = settings or get_settings()
    store_factory = store_factory or _default_store

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = store_factory(settings)
        try:
            store.open()
        except PersistenceError:
            # Keep the editing session available even if saved forms could not be read
            logger.exception("Starting without saved forms")
        app.state.store = store
        yield
        store.close()

    app = FastAPI(
        title="Form Builder",
        description="Compose forms, save them, and preview them with validation and derived fields",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(builder.router, prefix="/api/builder", tags=["Form Builder"])
    app.include_router(forms.router, prefix="/api/forms", tags=["Saved Forms"])
    app.include_router(preview.router, prefix="/api/preview", tags=["Preview"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "formbuilder-backend"}

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "Form Builder API",
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()
