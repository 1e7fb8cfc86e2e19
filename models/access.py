# models/access.py

from typing import List, Optional
from pydantic import BaseModel, Field

from models.enums import RedirectKind


# ===============================================================
# CATALOG ROWS (read-only, owned by the grant store)
# ===============================================================

class Organization(BaseModel):
    """A school. `active` is already False for deleted schools."""
    id: str
    name: str
    slug: Optional[str] = None
    active: bool = True


class Module(BaseModel):
    """
    Mirrors public.modules.
    role_hierarchy is ordered lowest → highest privilege.
    """
    id: str
    name: str
    display_name: Optional[str] = None
    subdomain: Optional[str] = None
    role_hierarchy: List[str] = Field(default_factory=list)
    active: bool = True


# ===============================================================
# GRANT LAYERS
# ===============================================================

class OrganizationGrant(BaseModel):
    """Mirrors public.user_schools (one row per user per school)."""
    user_id: str
    organization_id: str
    role: str
    active: bool = True


class ModuleGrant(BaseModel):
    """Mirrors public.user_schools_modules."""
    user_id: str
    organization_id: str
    module_id: str
    role: str
    active: bool = True


# ===============================================================
# DERIVED ACCESS (never persisted)
# ===============================================================

class EffectiveModuleAccess(BaseModel):
    module_id: str
    module_name: str
    display_name: Optional[str] = None
    subdomain: Optional[str] = None
    role: str
    role_hierarchy: List[str] = Field(default_factory=list)
    active: bool = True


class OrganizationAccess(BaseModel):
    organization_id: str
    organization_name: str
    slug: Optional[str] = None
    role: str
    is_superadmin: bool = False
    modules: List[EffectiveModuleAccess] = Field(default_factory=list)


# ===============================================================
# USER + ROUTING
# ===============================================================

class AccessUser(BaseModel):
    """
    Authenticated user as supplied by the account provider,
    including the two last-accessed preference fields.
    """
    id: str
    email: Optional[str] = None
    last_accessed_organization_id: Optional[str] = None
    last_accessed_module_id: Optional[str] = None


class RedirectDestination(BaseModel):
    """
    target is a logical surface ("setup", "hub" or a module name),
    never a URL. See services.navigation for URL building.
    """
    kind: RedirectKind
    target: str
    organization_id: Optional[str] = None
    module_id: Optional[str] = None


class SyncedSelection(BaseModel):
    organization_id: str
    created_at: float = 0.0
