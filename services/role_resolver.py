# services/role_resolver.py

from typing import List, Optional

from core.errors import NotFoundError
from core.grant_store import GrantStore
from core.roles import (
    can_manage_module,
    pick_module_grant,
    resolve_module_role,
    resolve_organization_role,
    usable_module_grants,
)
from models.access import EffectiveModuleAccess, Module, Organization
from services.navigation import module_display_name


class RoleResolver:
    """
    Store-backed role lookups for a single school or module.

    The merge rules themselves live in core.roles; this class only fetches
    the grant snapshot and checks that the referenced school / module exists
    and is active.
    """

    def __init__(self, store: GrantStore):
        self.store = store

    def _active_organization(self, organization_id: str) -> Organization:
        organization = self.store.get_organization(organization_id)
        if organization is None or not organization.active:
            raise NotFoundError(f"School {organization_id} not found")
        return organization

    def _enabled_module(self, organization_id: str, module_id: str) -> Module:
        modules: List[Module] = self.store.get_enabled_modules(organization_id)
        for module in modules:
            if module.id == module_id and module.active:
                return module
        raise NotFoundError(f"Module {module_id} is not enabled for school {organization_id}")

    def organization_role(self, user_id: str, organization_id: str) -> Optional[str]:
        self._active_organization(organization_id)

        grants = [
            g for g in self.store.get_organization_grants(user_id)
            if g.organization_id == organization_id
        ]
        module_grants = usable_module_grants(
            [
                mg for mg in self.store.get_module_grants(user_id)
                if mg.organization_id == organization_id
            ],
            self.store.get_enabled_modules(organization_id),
        )
        return resolve_organization_role(grants, module_grants)

    def module_access(
        self,
        user_id: str,
        organization_id: str,
        module_id: str,
    ) -> Optional[EffectiveModuleAccess]:
        self._active_organization(organization_id)
        module = self._enabled_module(organization_id, module_id)

        org_grant = next(
            (
                g for g in self.store.get_organization_grants(user_id)
                if g.organization_id == organization_id and g.active
            ),
            None,
        )
        module_grant = pick_module_grant(
            self.store.get_module_grants(user_id),
            organization_id,
            module_id,
            module.role_hierarchy,
        )

        role = resolve_module_role(organization_id, module_id, org_grant, module_grant)
        if role is None:
            return None

        return EffectiveModuleAccess(
            module_id=module.id,
            module_name=module.name,
            display_name=module.display_name or module_display_name(module.name),
            subdomain=module.subdomain,
            role=role,
            role_hierarchy=module.role_hierarchy,
        )

    def module_role(self, user_id: str, organization_id: str, module_id: str) -> Optional[str]:
        access = self.module_access(user_id, organization_id, module_id)
        return access.role if access else None

    def can_manage_module(self, user_id: str, organization_id: str, module_id: str) -> bool:
        return can_manage_module(self.module_access(user_id, organization_id, module_id))
