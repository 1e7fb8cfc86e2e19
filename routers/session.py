from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from supabase import Client

from core.account_store import update_last_accessed
from core.errors import NotFoundError
from core.grant_store import GrantStore
from core.logging_config import logger
from core.session_mirror import SessionMirror
from dependencies.auth import (
    get_account_client,
    get_current_user,
    get_grant_store,
    get_session_mirror,
)
from models.access import AccessUser, SyncedSelection
from services.access_catalog import build_catalog, find_module, find_organization

router = APIRouter(
    prefix="/session",
    tags=["Session"],
)


# ============================================================
# Pydantic Models
# ============================================================
class SwitchRequest(BaseModel):
    organization_id: str
    module_id: Optional[str] = None


class SelectionRead(BaseModel):
    selection: Optional[SyncedSelection] = None


# ============================================================
# Switch school (and optionally module)
# ============================================================
@router.post(
    "/switch",
    response_model=SelectionRead,
    summary="Switch the current school",
)
def switch_organization(
    payload: SwitchRequest,
    current_user: AccessUser = Depends(get_current_user),
    store: GrantStore = Depends(get_grant_store),
    account_client: Client = Depends(get_account_client),
    mirror: SessionMirror = Depends(get_session_mirror),
):
    catalog = build_catalog(current_user.id, store)

    entry = find_organization(catalog, payload.organization_id)
    if entry is None:
        raise NotFoundError(f"School {payload.organization_id} not found")

    module_id = None
    if payload.module_id:
        module = find_module(entry, payload.module_id)
        if module is None:
            raise NotFoundError(
                f"Module {payload.module_id} is not available in school {payload.organization_id}"
            )
        module_id = module.module_id

    update_last_accessed(account_client, current_user.id, entry.organization_id, module_id)

    # Best effort: a failed publish still leaves the preference persisted
    selection = mirror.publish(SyncedSelection(organization_id=entry.organization_id))
    if selection is None:
        logger.warning(f"School switch for {current_user.id} not mirrored to other surfaces")

    return SelectionRead(selection=selection)


# ============================================================
# Mirror read / clear
# ============================================================
@router.get(
    "/selection",
    response_model=SelectionRead,
    summary="Currently synced school selection",
)
def read_selection(mirror: SessionMirror = Depends(get_session_mirror)):
    return SelectionRead(selection=mirror.read())


@router.delete(
    "/selection",
    response_model=SelectionRead,
    summary="Clear the synced school selection",
)
def clear_selection(mirror: SessionMirror = Depends(get_session_mirror)):
    mirror.clear()
    return SelectionRead(selection=None)


# ============================================================
# Post-login return path
# ============================================================
class ReturnToWrite(BaseModel):
    url: str


class ReturnToRead(BaseModel):
    url: Optional[str] = None


@router.put(
    "/return-to",
    response_model=ReturnToRead,
    summary="Remember where to send the user after login",
)
def remember_return_to(
    payload: ReturnToWrite,
    mirror: SessionMirror = Depends(get_session_mirror),
):
    mirror.remember_return_to(payload.url)
    return ReturnToRead(url=mirror.return_to())


@router.get(
    "/return-to",
    response_model=ReturnToRead,
    summary="Remembered post-login path",
    description="Pass `consume=true` to forget the path once it has been read.",
)
def read_return_to(
    consume: bool = Query(False),
    mirror: SessionMirror = Depends(get_session_mirror),
):
    url = mirror.return_to()
    if consume:
        mirror.forget_return_to()
    return ReturnToRead(url=url)


@router.delete(
    "/return-to",
    response_model=ReturnToRead,
    summary="Forget the remembered post-login path",
)
def forget_return_to(mirror: SessionMirror = Depends(get_session_mirror)):
    mirror.forget_return_to()
    return ReturnToRead(url=None)
