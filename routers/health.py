# routers/health.py

from fastapi import APIRouter
from core.config_validator import validate_optional_config, validate_required_config
from core.supabase_client import ping_supabase

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


# -----------------------------------------------------
# GET /health/db
# Checks Supabase connection + grant table queries
# No auth required
# -----------------------------------------------------
@router.get("/db", summary="Supabase / DB health check")
async def health_db():
    """
    Verifies full Supabase connectivity.
    - Checks if URL + key are configured
    - Attempts to query every grant table
    - Returns row-count + error details per table

    Safe for external health monitors (no auth required).
    """
    try:
        status = ping_supabase()
        return {
            "service": "Supabase",
            "status": status.get("status", "unknown"),
            "details": status,
        }

    except Exception as e:
        return {
            "service": "Supabase",
            "status": "error",
            "error": str(e),
        }


# -----------------------------------------------------
# GET /health/config
# -----------------------------------------------------
@router.get("/config", summary="Configuration check")
async def health_config():
    missing = validate_required_config()
    return {
        "service": "SchoolTools Access API",
        "status": "ok" if not missing else "misconfigured",
        "missing": missing,
        "warnings": validate_optional_config(),
    }


# -----------------------------------------------------
# GET /health/app
# Simple API health check
# -----------------------------------------------------
@router.get("/app", summary="App health check")
async def health_app():
    """
    Lightweight health check for uptime monitors.
    """
    return {
        "service": "SchoolTools Access API",
        "status": "ok",
    }
