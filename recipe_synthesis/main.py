"""
Recipe Synthesis - Main Application Entry Point

FastAPI application exposing the resilient recipe synthesis pipeline.

The lifespan builds the process-wide collaborators once (Redis client,
TimedCache, QuotaGovernor, provider adapters, FallbackOrchestrator,
RecipeGenerationService) and stores them on ``app.state``.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from redis.asyncio import Redis

from recipe_synthesis.api.middleware.logging import RequestLoggingMiddleware
from recipe_synthesis.api.routes.admin import router as admin_router
from recipe_synthesis.api.routes.health import router as health_router
from recipe_synthesis.api.routes.recipes import router as recipes_router
from recipe_synthesis.core.config import Settings, get_settings
from recipe_synthesis.core.exceptions import ErrorCode, RecipeSynthesisException
from recipe_synthesis.models.responses import ErrorResponse
from recipe_synthesis.observability.logging import configure_logging
from recipe_synthesis.observability.metrics import MetricsMiddleware
from recipe_synthesis.providers.gemini import GeminiRecipeProvider
from recipe_synthesis.providers.spoonacular import SpoonacularRecipeProvider
from recipe_synthesis.providers.youtube import YouTubeMediaProvider
from recipe_synthesis.resilience.orchestrator import FallbackOrchestrator
from recipe_synthesis.services.cache import TimedCache
from recipe_synthesis.services.quota import QuotaGovernor
from recipe_synthesis.services.recipes import RecipeGenerationService

logger = logging.getLogger(__name__)

APP_NAME = "Recipe Synthesis"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "Resilient recipe synthesis over generative and database providers"


# =============================================================================
# Component wiring
# =============================================================================


def create_redis_client(settings: Settings) -> Redis:
    """Build the Redis client. Connection happens lazily on first command."""
    return Redis.from_url(settings.redis_url, decode_responses=True)


def build_components(settings: Settings, redis_client: Optional[Redis] = None) -> dict[str, Any]:
    """Construct the process-wide collaborators from ``settings``."""
    cache = TimedCache(
        redis_client,
        operation_timeout_seconds=settings.cache_operation_timeout_seconds,
        liveness_timeout_seconds=settings.cache_liveness_timeout_seconds,
    )
    quota = QuotaGovernor(
        cache,
        max_daily_calls=settings.max_daily_primary_calls,
        limit_enabled=settings.limit_primary_calls,
        default_breaker_ttl_seconds=settings.breaker_ttl_seconds,
    )
    primary = GeminiRecipeProvider(
        api_key=settings.gemini_api_key.get_secret_value(),
        model=settings.gemini_model,
        alternate_model=settings.gemini_alternate_model,
        api_base=settings.gemini_api_base,
        timeout_seconds=settings.gemini_timeout_seconds,
    )
    secondary = SpoonacularRecipeProvider(
        api_key=settings.spoonacular_api_key.get_secret_value(),
        api_base=settings.spoonacular_api_base,
        timeout_seconds=settings.spoonacular_timeout_seconds,
    )
    media = YouTubeMediaProvider(
        quota,
        api_key=settings.youtube_api_key.get_secret_value(),
        api_base=settings.youtube_api_base,
        timeout_seconds=settings.youtube_timeout_seconds,
        breaker_ttl_seconds=settings.breaker_ttl_seconds,
    )
    orchestrator = FallbackOrchestrator(
        cache,
        quota,
        primary=primary,
        secondary=secondary,
        recipe_cache_ttl_seconds=settings.recipe_cache_ttl_seconds,
        breaker_ttl_seconds=settings.breaker_ttl_seconds,
        enable_caching=settings.enable_caching,
    )
    return {
        "cache": cache,
        "quota": quota,
        "providers": [primary, secondary, media],
        "orchestrator": orchestrator,
        "recipe_service": RecipeGenerationService(orchestrator, media=media),
    }


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build collaborators on startup; close network clients on shutdown."""
    settings = get_settings()
    configure_logging(level=settings.log_level)
    logger.info(f"{APP_NAME} v{APP_VERSION} starting in {settings.environment} mode")

    redis_client = create_redis_client(settings)
    components = build_components(settings, redis_client)
    for name, component in components.items():
        setattr(app.state, name, component)
    app.state.initialized = True

    yield

    logger.info(f"{APP_NAME} shutting down")
    for provider in components["providers"]:
        await provider.aclose()
    await redis_client.aclose()
    app.state.initialized = False


# =============================================================================
# Error handling
# =============================================================================


async def synthesis_exception_handler(
    request: Request, exc: RecipeSynthesisException
) -> JSONResponse:
    """Map domain exceptions to the JSON error body."""
    status_code = 400 if exc.error_code == ErrorCode.INVALID_REQUEST else 500
    error_code = getattr(exc.error_code, "value", exc.error_code)
    body = ErrorResponse(error_code=str(error_code), message=exc.message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


# =============================================================================
# Application
# =============================================================================


def create_app() -> FastAPI:
    settings = get_settings()
    is_production = settings.environment == "production"

    application = FastAPI(
        title=APP_NAME,
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(RequestLoggingMiddleware)
    application.add_middleware(MetricsMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.environment == "development" else settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(RecipeSynthesisException, synthesis_exception_handler)

    application.include_router(health_router)
    application.include_router(recipes_router)
    application.include_router(admin_router)

    @application.get("/", tags=["Info"])
    async def root() -> dict[str, Any]:
        """Basic service information."""
        return {
            "service": APP_NAME,
            "version": APP_VERSION,
            "docs": "disabled" if is_production else "/docs",
        }

    return application


app = create_app()


def run() -> None:
    """Serve the application with uvicorn on the configured port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "recipe_synthesis.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
