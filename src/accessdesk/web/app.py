"""FastAPI application for the accessdesk dashboard service.

Exposes wizard form sessions, filtered list views, and dashboard summaries
on top of the dashboard REST backend.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from accessdesk import __version__
from accessdesk.api.client import RestClient
from accessdesk.core.config import Settings
from accessdesk.forms.registry import WizardRegistry
from accessdesk.forms.shell import FormSessionStore
from accessdesk.forms.validation import ValidationEngine
from accessdesk.forms.validators.cross_field import CrossFieldValidator
from accessdesk.web.forms_router import router as forms_router
from accessdesk.web.views_router import router as views_router

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str = __version__


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logging.getLogger("accessdesk").setLevel(level.upper())


def create_app(
    settings: Settings | None = None,
    api_client: RestClient | None = None,
    registry: WizardRegistry | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Tests pass in their own REST client and registry to get an isolated app.

    Args:
        settings: Application settings. Defaults to Settings().
        api_client: Optional pre-built REST client.
        registry: Optional pre-built wizard registry.

    Returns:
        A configured FastAPI instance.
    """
    if settings is None:
        settings = Settings()
    configure_logging(settings.log_level)

    owns_client = api_client is None
    if api_client is None:
        api_client = RestClient(config=settings.api)
    if registry is None:
        registry = WizardRegistry(settings.forms.wizards_dir)
    validation_engine = ValidationEngine(
        CrossFieldValidator(settings.forms.cross_field_rules_path)
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "accessdesk %s starting (%s), backend %s",
            __version__, settings.environment, settings.api.base_url,
        )
        yield
        if owns_client:
            await api_client.close()

    app = FastAPI(
        title="accessdesk",
        description="Accessibility compliance dashboard service",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store on app state for access in route handlers
    app.state.settings = settings
    app.state.api_client = api_client
    app.state.registry = registry
    app.state.validation_engine = validation_engine
    app.state.form_store = FormSessionStore()

    app.include_router(forms_router)
    app.include_router(views_router)

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", service="accessdesk")

    return app
