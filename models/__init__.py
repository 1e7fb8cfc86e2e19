# -------------------------
# Enums
# -------------------------
from .enums import (
    Role,
    RedirectKind,
)

# -------------------------
# Access Models
# -------------------------
from .access import (
    Organization,
    Module,
    OrganizationGrant,
    ModuleGrant,
    EffectiveModuleAccess,
    OrganizationAccess,
    AccessUser,
    RedirectDestination,
    SyncedSelection,
)

__all__ = [
    # enums
    "Role",
    "RedirectKind",

    # catalog rows
    "Organization",
    "Module",

    # grants
    "OrganizationGrant",
    "ModuleGrant",

    # derived access
    "EffectiveModuleAccess",
    "OrganizationAccess",

    # user + routing
    "AccessUser",
    "RedirectDestination",
    "SyncedSelection",
]
