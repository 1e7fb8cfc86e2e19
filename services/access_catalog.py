# services/access_catalog.py
# Builds the set of schools / modules visible to one user, each with its resolved role

from typing import Dict, List, Optional

from core.grant_store import GrantStore
from core.logging_config import logger
from core.roles import pick_module_grant, resolve_organization_role, usable_module_grants
from models.access import (
    EffectiveModuleAccess,
    ModuleGrant,
    OrganizationAccess,
    OrganizationGrant,
)
from models.enums import Role
from services.navigation import module_display_name


def build_catalog(user_id: str, store: GrantStore) -> List[OrganizationAccess]:
    """
    Resolve every school the user can reach.

    Reads both grant layers once, groups them by school, resolves the
    school-wide role, then intersects each school's enabled modules with
    the user's module grants. Inactive schools and modules never appear.

    Any store failure propagates (UpstreamUnavailable); there is no
    partial result.

    Returns:
        List of OrganizationAccess in no particular order
    """
    org_grants = [g for g in store.get_organization_grants(user_id) if g.active]
    module_grants = [mg for mg in store.get_module_grants(user_id) if mg.active]

    # Group both layers by school
    grouped: Dict[str, Dict[str, list]] = {}
    for grant in org_grants:
        grouped.setdefault(grant.organization_id, {"school": [], "module": []})["school"].append(grant)
    for mg in module_grants:
        grouped.setdefault(mg.organization_id, {"school": [], "module": []})["module"].append(mg)

    if not grouped:
        logger.info(f"No school access found for user {user_id}")
        return []

    catalog: List[OrganizationAccess] = []

    for organization_id, layers in grouped.items():
        entry = _build_entry(store, organization_id, layers["school"], layers["module"])
        if entry is not None:
            catalog.append(entry)

    logger.info(f"Built access catalog for user {user_id}: {len(catalog)} schools")
    return catalog


def _build_entry(
    store: GrantStore,
    organization_id: str,
    org_grants: List[OrganizationGrant],
    module_grants: List[ModuleGrant],
) -> Optional[OrganizationAccess]:
    organization = store.get_organization(organization_id)
    if organization is None or not organization.active:
        logger.debug(f"Skipping missing or inactive school {organization_id}")
        return None

    enabled = [m for m in store.get_enabled_modules(organization_id) if m.active]

    # Grants on inactive or disabled modules count for nothing, school role included
    module_grants = usable_module_grants(module_grants, enabled)

    role = resolve_organization_role(org_grants, module_grants)
    if role is None:
        return None

    modules: List[EffectiveModuleAccess] = []
    for module in enabled:
        grant = pick_module_grant(module_grants, organization_id, module.id, module.role_hierarchy)
        if grant is None:
            continue

        modules.append(
            EffectiveModuleAccess(
                module_id=module.id,
                module_name=module.name,
                display_name=module.display_name or module_display_name(module.name),
                subdomain=module.subdomain,
                role=grant.role,
                role_hierarchy=module.role_hierarchy,
                active=True,
            )
        )

    return OrganizationAccess(
        organization_id=organization.id,
        organization_name=organization.name,
        slug=organization.slug,
        role=role,
        is_superadmin=role == Role.superadmin.value,
        modules=modules,
    )


# ============================================================
# Lookup helpers
# ============================================================
def sort_catalog(catalog: List[OrganizationAccess]) -> List[OrganizationAccess]:
    """Deterministic order for display: by school name, then id."""
    return sorted(catalog, key=lambda e: (e.organization_name.lower(), e.organization_id))


def find_organization(
    catalog: List[OrganizationAccess],
    organization_id: Optional[str],
) -> Optional[OrganizationAccess]:
    if not organization_id:
        return None
    for entry in catalog:
        if entry.organization_id == organization_id:
            return entry
    return None


def find_module(
    entry: OrganizationAccess,
    module_ref: Optional[str],
) -> Optional[EffectiveModuleAccess]:
    """Match on module id first, then module name."""
    if not module_ref:
        return None
    for module in entry.modules:
        if module.module_id == module_ref:
            return module
    for module in entry.modules:
        if module.module_name == module_ref:
            return module
    return None
