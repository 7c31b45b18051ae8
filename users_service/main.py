"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (CORS, request context)
  - Mount the UsersService RPC router
  - Expose health check endpoint

Collaborators:
  - FastAPI: ASGI web framework
  - CORSMiddleware: Cross-Origin Resource Sharing handler
  - RpcRequestMiddleware: request id, context and outcome log
  - rpc_routes.router: UsersService RPC methods

Constraints:
  - CORS configurable via ALLOWED_ORIGINS env var (comma-separated)
  - Connection pool is only opened when the Postgres store is selected

Notes:
  - Middleware order matters: RpcRequest -> CORS -> routes
  - /healthz follows Kubernetes health check convention
  - Run with: uvicorn users_service.main:app --port 5002
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import get_settings
from .container import get_user_repository, uses_in_memory_store
from .exception_handlers import register_exception_handlers
from .infrastructure.db.pool import close_pool, init_pool
from .logger import logger
from .middleware import RpcRequestMiddleware
from .rpc_routes import router as rpc_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Validates settings and initializes pool."""
    # This will raise ValidationError if env vars are invalid
    settings = get_settings()
    logger.setLevel(settings.log_level.upper())

    use_postgres = not uses_in_memory_store()
    if use_postgres:
        await init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    logger.info(
        "Users service starting up",
        extra={
            "app_env": settings.app_env,
            "store": "postgres" if use_postgres else "memory",
            "db_pool_min": settings.db_pool_min_size,
            "db_pool_max": settings.db_pool_max_size,
        },
    )
    yield

    if use_postgres:
        await close_pool()
    logger.info("Users service shutting down")


def _get_allowed_origins() -> list[str]:
    """Get CORS origins from settings, with fallback for import-time errors."""
    try:
        return get_settings().get_allowed_origins_list()
    except ValueError:
        # R: Invalid settings surface again (and fail) in lifespan
        return ["http://localhost:3000"]


app = FastAPI(
    title="Users Service",
    version=__version__,
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "users",
            "description": "UsersService RPC methods (requires bearer token)",
        },
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_allowed_origins(),
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Request-Id"],
)

# R: Added last so it runs first
app.add_middleware(RpcRequestMiddleware)

app.include_router(rpc_router)

register_exception_handlers(app)


# R: Health check endpoint for monitoring/orchestration (Kubernetes, Docker)
@app.get("/healthz")
async def healthz(request: Request):
    """
    R: Health check that verifies the user store.

    Returns:
        ok: True if the store answered
        db: "connected" or "disconnected"
        request_id: Correlation ID for this request
    """
    db_status = "disconnected"
    try:
        if await get_user_repository().ping():
            db_status = "connected"
    except Exception as e:
        logger.warning("Health check: store unavailable", extra={"error": str(e)})

    return {
        "ok": db_status == "connected",
        "db": db_status,
        "request_id": getattr(request.state, "request_id", None),
    }
