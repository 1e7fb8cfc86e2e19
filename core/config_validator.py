# core/config_validator.py

from typing import List
from core.config import settings
from core.logging_config import logger


def validate_required_config() -> List[str]:
    """
    Validate that all required environment variables are set.
    Returns list of missing required variables.
    """
    missing = []

    # Required for token validation and grant reads
    if not settings.SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        missing.append("SUPABASE_SERVICE_ROLE_KEY")

    return missing


def validate_optional_config() -> List[str]:
    """
    Validate optional but recommended configuration.
    Returns list of warnings.
    """
    warnings = []

    if not settings.SUPABASE_ANON_KEY:
        warnings.append("SUPABASE_ANON_KEY (optional but recommended)")

    if settings.SURFACE_ID != "app" and settings.SURFACE_ID not in settings.MODULE_HOSTS:
        warnings.append(f"SURFACE_ID '{settings.SURFACE_ID}' has no entry in MODULE_HOSTS")

    if settings.SESSION_MIRROR_TTL_SECONDS <= 0:
        warnings.append("SESSION_MIRROR_TTL_SECONDS <= 0 (synced selections expire immediately)")

    return warnings


def validate_config_on_startup():
    """
    Logs missing required config as errors and optional config as warnings.
    Never raises: the health endpoints report the same lists.
    """
    missing_required = validate_required_config()
    missing_optional = validate_optional_config()

    if missing_required:
        logger.error(f"Missing required environment variables: {', '.join(missing_required)}")

    for warning in missing_optional:
        logger.warning(f"Optional configuration missing: {warning}")

    if not missing_required:
        logger.info("Configuration validation passed")
