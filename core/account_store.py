# core/account_store.py

from typing import Optional

from supabase import Client

from core.errors import UpstreamUnavailable, upstream_error
from core.logging_config import logger
from models.access import AccessUser


# ============================================================
# Load the public.users row behind an auth user
# ============================================================
def load_access_user(client: Client, user_id: str, email: Optional[str] = None) -> AccessUser:
    """
    Reads the two last-accessed preference columns.
    A missing users row is not an error: the user simply has no preferences yet.
    """
    try:
        result = (
            client.table("users")
            .select("id, email, last_accessed_school_id, last_accessed_module")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        raise upstream_error(e, "Failed to load user preferences") from e

    row = result.data[0] if result.data else {}

    return AccessUser(
        id=user_id,
        email=row.get("email") or email,
        last_accessed_organization_id=row.get("last_accessed_school_id"),
        last_accessed_module_id=row.get("last_accessed_module"),
    )


# ============================================================
# Persist an explicit school / module switch
# ============================================================
def update_last_accessed(
    client: Optional[Client],
    user_id: str,
    organization_id: str,
    module_id: Optional[str] = None,
) -> None:
    """
    Switching school resets the module preference unless a module
    is given with it.
    """
    if client is None:
        raise UpstreamUnavailable("Supabase client not configured")

    payload = {
        "last_accessed_school_id": organization_id,
        "last_accessed_module": module_id,
    }

    try:
        client.table("users").update(payload).eq("id", user_id).execute()
    except Exception as e:
        raise upstream_error(e, "Failed to update user preferences") from e

    logger.info(f"User {user_id} switched to school {organization_id} (module={module_id})")
