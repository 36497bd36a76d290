"""FastAPI application entry point for the Extension Relay."""

import logging

from fastapi import FastAPI

from app import __version__
from app.config import Settings, get_settings
from app.cors import CORSGateMiddleware
from app.routes import router
from app.security import RelayTraceMiddleware
from extension_relay.core.logging import setup_logging

logger = logging.getLogger(__name__)


def _log_startup(settings: Settings) -> None:
    if not settings.hf_api_key:
        logger.warning("HF_API_KEY is not set. Requests to the inference API will fail.")
    if settings.allowed_origin_set:
        logger.info("Allowed origins: %s", ", ".join(sorted(settings.allowed_origin_set)))
    if settings.cors_wildcard_fallback:
        logger.info("Permissive CORS: unknown origins receive Access-Control-Allow-Origin: *")
    logger.info(
        "Relaying %s-style requests to %s (default model %s)",
        settings.upstream_api_style,
        settings.effective_upstream_url,
        settings.default_model,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and return the FastAPI application with all middleware configured."""
    if settings is None:
        settings = get_settings()

    setup_logging(settings.log_level)

    application = FastAPI(
        title="Extension Relay",
        description="Relays browser-extension requests to a hosted inference API with a server-held credential",
        version=__version__,
    )

    # Built once; routes read it through the get_relay_config dependency
    application.state.relay_config = settings.to_relay_config()
    application.state.log_request_bodies = settings.log_request_bodies_bool

    # Starlette runs the last added middleware first:
    # call tracing -> CORS gate -> routes
    application.add_middleware(
        CORSGateMiddleware,
        allowed_origins=settings.allowed_origin_set,
        allow_wildcard=settings.cors_wildcard_fallback,
    )
    application.add_middleware(RelayTraceMiddleware)

    application.include_router(router)

    _log_startup(settings)
    return application


app = create_app()
