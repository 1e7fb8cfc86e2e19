# core/supabase_client.py

from supabase import create_client, Client
from core.config import settings
from core.logging_config import logger


# ============================================================
# Supabase Client Factory (ALWAYS service role)
# ============================================================

def get_supabase_client() -> Client:
    """
    Creates a Supabase client using the SERVICE ROLE KEY.
    REQUIRED for:
        - auth.get_user (token validation)
        - reading grant rows across users (bypasses RLS)
        - updating users.last_accessed_* preferences
    """
    try:
        supabase_url = settings.SUPABASE_URL
        supabase_key = settings.SUPABASE_SERVICE_ROLE_KEY  # MUST be service-role

        if not supabase_url or not supabase_key:
            logger.error("Missing Supabase credentials")
            logger.error(f"   URL: {supabase_url}")
            logger.error(f"   SERVICE ROLE KEY: {'SET' if supabase_key else 'MISSING'}")
            return None

        return create_client(supabase_url, supabase_key)

    except Exception as e:
        logger.error(f"Supabase Init Error: {e}", exc_info=True)
        return None


# ============================================================
# Ping Supabase for health checks
# ============================================================

GRANT_TABLES = ["schools", "modules", "school_modules", "user_schools", "user_schools_modules"]


def ping_supabase() -> dict:
    """
    Simple connectivity check against every table the grant store reads.
    Does NOT query auth tables.
    """
    try:
        client = get_supabase_client()
        if client is None:
            return {"service": "Supabase", "status": "not_configured"}

        results = {}

        for t in GRANT_TABLES:
            try:
                res = client.table(t).select("*").limit(1).execute()
                results[t] = {
                    "status": "ok",
                    "rows_found": len(res.data or [])
                }
            except Exception as err:
                results[t] = {"status": "error", "detail": str(err)}

        return {
            "service": "Supabase",
            "status": "ok",
            "tables": results,
        }

    except Exception as e:
        logger.error(f"Supabase Ping Error: {e}", exc_info=True)
        return {"service": "Supabase", "status": "error", "detail": str(e)}
