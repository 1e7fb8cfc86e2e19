# core/errors.py


class AccessError(Exception):
    """Base class for access-resolution failures."""

    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class NotFoundError(AccessError):
    """
    Referenced school or module is missing, inactive,
    or not enabled for the school.
    """

    status_code = 404


class UpstreamUnavailable(AccessError):
    """Grant store unreachable or returned an error."""

    status_code = 503


class InvalidPreference(AccessError):
    """
    A stored last-accessed school / module no longer resolves
    to an active grant. Only the redirect planner raises and
    consumes this; it never reaches an HTTP response.
    """


def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1 - Supabase Auth / GoTrue errors
    if hasattr(error, "message"):
        try:
            return str(error.message)
        except Exception:
            pass

    # Case 2 - Supabase errors with args (common)
    if hasattr(error, "args") and error.args:
        try:
            return str(error.args[0])
        except Exception:
            pass

    # Case 3 - Plain string fallback
    try:
        return str(error)
    except Exception:
        return "Unknown Supabase error"


def upstream_error(error: Exception, operation: str) -> UpstreamUnavailable:
    """
    Convert a Supabase / database error into UpstreamUnavailable.
    Returns (doesn't raise) so caller can `raise ... from error`.
    """
    from core.logging_config import logger

    detail = extract_supabase_error(error)
    logger.error(f"{operation}: {detail}")
    return UpstreamUnavailable(f"{operation} failed")
