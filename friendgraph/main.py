"""
FastAPI Application Entry Point
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException

from friendgraph.api.router import api_router
from friendgraph.core.config import settings
from friendgraph.core.errors import (
    AppError,
    app_exception_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from friendgraph.core.logging import (
    RequestContextMiddleware,
    get_logger,
    setup_logging,
)
from friendgraph.infra.db import close_db_connection, init_db

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    if settings.db_create_tables:
        await init_db()
    logger.info("app.startup", env=settings.env)

    yield

    # Shutdown
    await close_db_connection()
    logger.info("app.shutdown")


tags_metadata = [
    {
        "name": "friends",
        "description": "Friendships, common friends and update subscriptions.",
    },
    {
        "name": "health",
        "description": "System health check.",
    },
]


def create_app() -> FastAPI:
    app = FastAPI(
        title="friendgraph",
        description="""
Relationship graph between users identified by email address.

## Features
* **Friendships**: mutual, rejected when either side has blocked the other.
* **Friends lists**: a user's friends and the common friends of two users.
* **Subscriptions**: follow updates from another user.
""",
        version="0.1.0",
        openapi_tags=tags_metadata,
        openapi_url=f"{settings.api_prefix}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Middleware
    app.add_middleware(RequestContextMiddleware)

    # CORS Configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_credentials,
        allow_methods=settings.cors_methods,
        allow_headers=settings.cors_headers,
    )

    @app.get("/", tags=["health"], include_in_schema=False)
    async def root():
        return {
            "message": "Welcome to the friendgraph API",
            "docs": "/docs",
            "status": "operational"
        }

    # Routes
    app.include_router(api_router, prefix=settings.api_prefix)

    # Exception Handlers
    app.add_exception_handler(AppError, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(
        "friendgraph.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
