import os
import sys
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Ensure local imports resolve
sys.path.append(os.path.dirname(__file__))

# Core
from core.config import settings
from core.config_validator import validate_config_on_startup
from core.errors import AccessError
from core.logging_config import logger

# -------------------------------------------------
# Routers
# -------------------------------------------------
from routers.access import router as access_router
from routers.session import router as session_router
from routers.health import router as health_router


# -------------------------------------------------
# Create the Application
# -------------------------------------------------
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="SchoolTools access resolution, post-login routing and cross-surface school sync",
    )

    # -------------------------------------------------
    # CORS
    # -------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------
    # Startup logging
    # -------------------------------------------------
    @app.on_event("startup")
    async def on_startup():
        logger.info(f"🚀 Starting {settings.PROJECT_NAME} (surface: {settings.SURFACE_ID})")
        validate_config_on_startup()

    # -------------------------------------------------
    # Error handling
    # -------------------------------------------------
    @app.exception_handler(AccessError)
    async def handle_access_error(request: Request, exc: AccessError):
        logger.warning(f"{type(exc).__name__} at {request.url} - {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (401, 403, 500):
            logger.warning(
                f"HTTP {exc.status_code} at {request.url} - {exc.detail}"
            )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(Exception)
    async def handle_unhandled(request: Request, exc: Exception):
        logger.error("Unhandled error at %s", request.url, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # -------------------------------------------------
    # Register Routers
    # -------------------------------------------------
    app.include_router(access_router)
    app.include_router(session_router)
    app.include_router(health_router)

    # -------------------------------------------------
    # Root Redirect (central hub)
    # -------------------------------------------------
    @app.get("/", include_in_schema=False)
    async def root():
        return RedirectResponse(settings.HUB_URL)

    return app


# Create the global FastAPI instance
app = create_app()
