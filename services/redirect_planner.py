# services/redirect_planner.py

"""
Post-login / module-switch routing.

Both planners are pure: plain data in, one RedirectDestination out, no I/O
and no clock. The most specific, most recently expressed preference wins;
otherwise fall back to broader choices, and never guess between several
equally valid schools.
"""

from typing import List

from core.errors import InvalidPreference
from core.logging_config import logger
from models.access import (
    AccessUser,
    EffectiveModuleAccess,
    OrganizationAccess,
    RedirectDestination,
)
from models.enums import RedirectKind
from services.access_catalog import find_module, find_organization


HUB_TARGET = "hub"
SETUP_TARGET = "setup"


def preferred_organization(user: AccessUser, catalog: List[OrganizationAccess]) -> OrganizationAccess:
    if not user.last_accessed_organization_id:
        raise InvalidPreference("no last-accessed school")

    entry = find_organization(catalog, user.last_accessed_organization_id)
    if entry is None:
        raise InvalidPreference(f"school {user.last_accessed_organization_id} no longer accessible")
    return entry


def preferred_module(user: AccessUser, entry: OrganizationAccess) -> EffectiveModuleAccess:
    if not user.last_accessed_module_id:
        raise InvalidPreference("no last-accessed module")

    module = find_module(entry, user.last_accessed_module_id)
    if module is None or not module.active:
        raise InvalidPreference(
            f"module {user.last_accessed_module_id} not accessible in school {entry.organization_id}"
        )
    return module


# ============================================================
# Multi-module planner (hub)
# ============================================================
def plan_redirect(user: AccessUser, catalog: List[OrganizationAccess]) -> RedirectDestination:
    # 1. No schools - setup required
    if not catalog:
        return RedirectDestination(kind=RedirectKind.school_setup, target=SETUP_TARGET)

    try:
        entry = preferred_organization(user, catalog)
    except InvalidPreference as e:
        logger.debug(f"Ignoring school preference for user {user.id}: {e}")
        entry = None

    if entry is not None:
        # 2. Preferred school + module, both still accessible
        try:
            module = preferred_module(user, entry)
            return RedirectDestination(
                kind=RedirectKind.direct_module,
                target=module.module_name,
                organization_id=entry.organization_id,
                module_id=module.module_id,
            )
        except InvalidPreference as e:
            logger.debug(f"Ignoring module preference for user {user.id}: {e}")

        # 3. Preferred school, no/invalid module preference
        return RedirectDestination(
            kind=RedirectKind.module_selection,
            target=HUB_TARGET,
            organization_id=entry.organization_id,
        )

    # 4. Single school
    if len(catalog) == 1:
        return RedirectDestination(
            kind=RedirectKind.module_selection,
            target=HUB_TARGET,
            organization_id=catalog[0].organization_id,
        )

    # 5. Multiple schools - let user choose
    return RedirectDestination(kind=RedirectKind.school_selection, target=HUB_TARGET)


# ============================================================
# Single-module planner (a module surface routing its own users)
# ============================================================
def plan_single_module_redirect(
    user: AccessUser,
    catalog: List[OrganizationAccess],
    module_name: str,
) -> RedirectDestination:
    """
    Used by a module surface that only cares about its own module:
    a valid last school (or a single school) goes straight into the module,
    skipping module selection.
    """
    if not catalog:
        return RedirectDestination(kind=RedirectKind.school_setup, target=SETUP_TARGET)

    try:
        entry = preferred_organization(user, catalog)
    except InvalidPreference as e:
        logger.debug(f"Ignoring school preference for user {user.id}: {e}")
        entry = catalog[0] if len(catalog) == 1 else None

    if entry is None:
        return RedirectDestination(kind=RedirectKind.school_selection, target=HUB_TARGET)

    module = find_module(entry, module_name)
    return RedirectDestination(
        kind=RedirectKind.direct_module,
        target=module_name,
        organization_id=entry.organization_id,
        module_id=module.module_id if module else None,
    )
