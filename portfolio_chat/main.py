"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, and configures lifespan.

Dependencies: fastapi, portfolio_chat.api, portfolio_chat.observability, portfolio_chat.configs
System role: Application initialization and configuration
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portfolio_chat.api.routers import chat_router, health_router
from portfolio_chat.application.context import AppContext
from portfolio_chat.configs import Settings, get_settings
from portfolio_chat.observability.logger import configure_logging
from portfolio_chat.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    context: AppContext | None = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Settings override (environment if None)
        context: Pre-built application context (built in the lifespan if None)

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan context manager.

        Builds the shared context and connects the vector store on startup,
        releases the connection on shutdown.
        """
        configure_logging(settings.log_level)
        logger.info("Application startup: logging configured")

        app_context = context or AppContext(settings)
        try:
            await app_context.startup()
        except Exception as e:
            logger.exception(
                "Failed to initialize application resources",
                extra={"error": str(e)},
            )
            raise
        app.state.context = app_context
        logger.info("Application startup complete")

        yield

        await app_context.close()
        logger.info("Application shutdown")

    app = FastAPI(
        title="Portfolio Chat API",
        description="Retrieval-augmented assistant answering questions about a portfolio",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Added first = last to execute
    app.add_middleware(CorrelationMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[
            "Retry-After",
            "X-RateLimit-Limit",
            "X-RateLimit-Remaining",
            "X-RateLimit-Reset",
            "X-Correlation-ID",
        ],
    )

    app.include_router(chat_router, prefix=settings.api_prefix)
    app.include_router(health_router, prefix=settings.api_prefix)

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "portfolio_chat.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
    )
