# core/roles.py

from typing import Iterable, List, Optional

from models.access import EffectiveModuleAccess, Module, ModuleGrant, OrganizationGrant
from models.enums import Role


# ============================================
# GLOBAL ROLE PRECEDENCE (lowest → highest)
# ============================================
ROLE_PRECEDENCE = {role.value: rank for rank, role in enumerate(Role)}

# Anything outside the precedence map ranks as the floor role
FLOOR_ROLE = Role.teacher.value

# Module roles at or above this may manage module permissions
MODULE_MANAGER_ROLE = Role.admin.value


def role_rank(role: Optional[str]) -> int:
    return ROLE_PRECEDENCE.get(role or "", ROLE_PRECEDENCE[FLOOR_ROLE])


def highest_role(roles: Iterable[str]) -> Optional[str]:
    """
    Highest role under superadmin > admin > teacher.
    Unknown role names collapse to the floor role.
    Returns None for an empty iterable.
    """
    best = None
    for role in roles:
        candidate = role if role in ROLE_PRECEDENCE else FLOOR_ROLE
        if best is None or role_rank(candidate) > role_rank(best):
            best = candidate
    return best


# =====================================================
# SCHOOL-WIDE ROLE
# =====================================================
def resolve_organization_role(
    grants: List[OrganizationGrant],
    module_grants: List[ModuleGrant],
) -> Optional[str]:
    """
    Effective school-wide role from both grant layers.

    Both lists are expected to be scoped to one school already.
    Rows that are not active count as absent.

    1. An active school grant is authoritative.
    2. Otherwise the highest role among active module grants.
    3. Otherwise None (no access, not an error).
    """
    active_grants = [g for g in grants if g.active]
    if active_grants:
        # At most one active row per school; first one wins if the store disagrees
        return active_grants[0].role

    return highest_role(mg.role for mg in module_grants if mg.active)


def usable_module_grants(
    module_grants: List[ModuleGrant],
    enabled_modules: List[Module],
) -> List[ModuleGrant]:
    """Active module grants whose module is active and enabled for the school."""
    enabled_ids = {m.id for m in enabled_modules if m.active}
    return [mg for mg in module_grants if mg.active and mg.module_id in enabled_ids]


# =====================================================
# MODULE ROLE
# =====================================================
def resolve_module_role(
    organization_id: str,
    module_id: str,
    org_grant: Optional[OrganizationGrant],
    module_grant: Optional[ModuleGrant],
) -> Optional[str]:
    """
    Module role for one (school, module) pair.

    Only an active module grant for exactly this pair counts.
    `org_grant` is accepted so callers can pass both layers side by side,
    but a school-wide role (superadmin included) never implies module access.
    """
    if module_grant is None or not module_grant.active:
        return None

    if (
        module_grant.organization_id != organization_id
        or module_grant.module_id != module_id
    ):
        return None

    return module_grant.role


def pick_module_grant(
    module_grants: List[ModuleGrant],
    organization_id: str,
    module_id: str,
    role_hierarchy: Optional[List[str]] = None,
) -> Optional[ModuleGrant]:
    """
    The active grant for (school, module). If the store ever returns more
    than one, the highest in the module hierarchy wins so the result
    stays deterministic.
    """
    matching = [
        mg for mg in module_grants
        if mg.active
        and mg.organization_id == organization_id
        and mg.module_id == module_id
    ]
    if not matching:
        return None

    hierarchy = role_hierarchy or []
    return max(
        matching,
        key=lambda mg: (module_role_rank(mg.role, hierarchy), role_rank(mg.role)),
    )


# =====================================================
# MODULE HIERARCHY HELPERS
# =====================================================
def module_role_rank(role: Optional[str], hierarchy: List[str]) -> int:
    """Position in the module's own hierarchy; -1 when not listed."""
    if not role or role not in hierarchy:
        return -1
    return hierarchy.index(role)


def has_module_role(access: EffectiveModuleAccess, minimum_role: str) -> bool:
    """
    True if the user's module role is at or above `minimum_role`.
    Uses the module's own hierarchy when both roles appear in it,
    otherwise the global precedence.
    """
    hierarchy = access.role_hierarchy or []
    if access.role in hierarchy and minimum_role in hierarchy:
        return module_role_rank(access.role, hierarchy) >= module_role_rank(minimum_role, hierarchy)

    return role_rank(access.role) >= role_rank(minimum_role)


def can_manage_module(access: Optional[EffectiveModuleAccess]) -> bool:
    if access is None or not access.active:
        return False
    return has_module_role(access, MODULE_MANAGER_ROLE)
