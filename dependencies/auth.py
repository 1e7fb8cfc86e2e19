from typing import Optional
from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from supabase import Client

from core.account_store import load_access_user
from core.config import settings
from core.grant_store import GrantStore, SupabaseGrantStore
from core.local_store import get_durable_store, get_scoped_store
from core.session_mirror import SessionMirror
from core.supabase_client import get_supabase_client
from models.access import AccessUser


bearer_scheme = HTTPBearer()


# ============================================================
# AUTH DECODING (Supabase: validates JWT + loads preferences)
# ============================================================
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> AccessUser:

    token = credentials.credentials

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    client: Client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    # ---------------------------------------------------------
    # Validate JWT via Supabase GoTrue
    # ---------------------------------------------------------
    try:
        auth_resp = client.auth.get_user(token)
        if not auth_resp or not auth_resp.user:
            raise unauthorized
        auth_user = auth_resp.user
    except Exception:
        raise unauthorized

    # ---------------------------------------------------------
    # Load last-accessed preferences from public.users
    # ---------------------------------------------------------
    return load_access_user(client, auth_user.id, email=auth_user.email)


# ============================================================
# GRANT STORE
# ============================================================
def get_grant_store() -> GrantStore:
    return SupabaseGrantStore(get_supabase_client())


# ============================================================
# ACCOUNT STORE CLIENT (preference writes)
# ============================================================
def get_account_client() -> Optional[Client]:
    return get_supabase_client()


# ============================================================
# SESSION MIRROR (one namespace per user, one scope per tab)
# ============================================================
def get_session_mirror(
    current_user: AccessUser = Depends(get_current_user),
    x_tab_id: Optional[str] = Header(None),
) -> SessionMirror:
    return SessionMirror(
        durable=get_durable_store(),
        scoped=get_scoped_store(),
        ttl_seconds=settings.SESSION_MIRROR_TTL_SECONDS,
        namespace=current_user.id,
        scope=x_tab_id,
        source=settings.SURFACE_ID,
    )
