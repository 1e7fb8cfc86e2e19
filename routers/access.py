from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from core.config import settings
from core.grant_store import GrantStore
from core.roles import can_manage_module
from dependencies.auth import get_current_user, get_grant_store
from models.access import AccessUser, OrganizationAccess, RedirectDestination
from services.access_catalog import build_catalog, sort_catalog
from services.navigation import destination_url
from services.redirect_planner import plan_redirect, plan_single_module_redirect
from services.role_resolver import RoleResolver

router = APIRouter(
    prefix="/access",
    tags=["Access"],
)


# ============================================================
# Pydantic Models
# ============================================================
class RedirectRead(BaseModel):
    destination: RedirectDestination
    url: Optional[str] = None


class OrganizationRoleRead(BaseModel):
    organization_id: str
    role: Optional[str] = None


class ModuleRoleRead(BaseModel):
    organization_id: str
    module_id: str
    role: Optional[str] = None
    can_manage: bool = False


# ============================================================
# Catalog
# ============================================================
@router.get(
    "/catalog",
    response_model=List[OrganizationAccess],
    summary="Schools and modules visible to the current user",
)
def read_catalog(
    current_user: AccessUser = Depends(get_current_user),
    store: GrantStore = Depends(get_grant_store),
):
    return sort_catalog(build_catalog(current_user.id, store))


# ============================================================
# Post-login redirect
# ============================================================
@router.get(
    "/redirect",
    response_model=RedirectRead,
    summary="Where the current user should land",
    description="Pass `module` to get the single-module variant used by module surfaces.",
)
def read_redirect(
    module: Optional[str] = Query(None),
    current_user: AccessUser = Depends(get_current_user),
    store: GrantStore = Depends(get_grant_store),
):
    catalog = build_catalog(current_user.id, store)

    if module:
        destination = plan_single_module_redirect(current_user, catalog, module)
    else:
        destination = plan_redirect(current_user, catalog)

    return RedirectRead(
        destination=destination,
        url=destination_url(
            destination,
            hub_url=settings.HUB_URL,
            setup_url=settings.SETUP_URL,
            module_hosts=settings.MODULE_HOSTS,
        ),
    )


# ============================================================
# Single-school / single-module roles
# ============================================================
@router.get(
    "/organizations/{organization_id}/role",
    response_model=OrganizationRoleRead,
    summary="Effective school-wide role",
)
def read_organization_role(
    organization_id: str,
    current_user: AccessUser = Depends(get_current_user),
    store: GrantStore = Depends(get_grant_store),
):
    role = RoleResolver(store).organization_role(current_user.id, organization_id)
    return OrganizationRoleRead(organization_id=organization_id, role=role)


@router.get(
    "/organizations/{organization_id}/modules/{module_id}/role",
    response_model=ModuleRoleRead,
    summary="Effective module role",
)
def read_module_role(
    organization_id: str,
    module_id: str,
    current_user: AccessUser = Depends(get_current_user),
    store: GrantStore = Depends(get_grant_store),
):
    access = RoleResolver(store).module_access(current_user.id, organization_id, module_id)

    return ModuleRoleRead(
        organization_id=organization_id,
        module_id=module_id,
        role=access.role if access else None,
        can_manage=can_manage_module(access),
    )
