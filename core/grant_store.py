# core/grant_store.py

"""
Read-only query surface over the two grant layers and the
school / module catalogs.

Everything above this module works against the GrantStore protocol.
SupabaseGrantStore is the production implementation; any failure it
meets is raised as UpstreamUnavailable so callers never see raw
PostgREST errors.
"""

from typing import Any, Dict, List, Optional, Protocol

from supabase import Client

from core.errors import UpstreamUnavailable, upstream_error
from core.logging_config import logger
from models.access import Module, ModuleGrant, Organization, OrganizationGrant


class GrantStore(Protocol):
    def get_organization_grants(self, user_id: str) -> List[OrganizationGrant]:
        ...

    def get_module_grants(self, user_id: str) -> List[ModuleGrant]:
        ...

    def get_enabled_modules(self, organization_id: str) -> List[Module]:
        ...

    def get_organization(self, organization_id: str) -> Optional[Organization]:
        ...


# -----------------------------------------------------
# Row → model mapping
# -----------------------------------------------------
def _is_active(row: Dict[str, Any], key: str = "active") -> bool:
    # Only an explicit true counts; NULL / missing is treated as absent
    return row.get(key) is True


def organization_from_row(row: Dict[str, Any]) -> Organization:
    return Organization(
        id=str(row["id"]),
        name=row.get("name") or "",
        slug=row.get("slug"),
        active=_is_active(row) and not row.get("deleted", False),
    )


def module_from_row(row: Dict[str, Any]) -> Module:
    return Module(
        id=str(row["id"]),
        name=row.get("name") or "",
        display_name=row.get("display_name"),
        subdomain=row.get("subdomain"),
        role_hierarchy=list(row.get("role_hierarchy") or []),
        active=_is_active(row, "is_active"),
    )


def organization_grant_from_row(row: Dict[str, Any]) -> OrganizationGrant:
    return OrganizationGrant(
        user_id=str(row["user_id"]),
        organization_id=str(row["school_id"]),
        role=row.get("role") or "",
        active=_is_active(row),
    )


def module_grant_from_row(row: Dict[str, Any]) -> ModuleGrant:
    return ModuleGrant(
        user_id=str(row["user_id"]),
        organization_id=str(row["school_id"]),
        module_id=str(row["module_id"]),
        role=row.get("role") or "",
        active=_is_active(row),
    )


# ============================================================
# Supabase implementation
# ============================================================
class SupabaseGrantStore:
    """
    Tables:
        schools               (id, name, slug, active, deleted)
        modules               (id, name, display_name, subdomain, role_hierarchy, is_active)
        school_modules        (school_id, module_id, enabled)
        user_schools          (user_id, school_id, role, active)
        user_schools_modules  (user_id, school_id, module_id, role, active)
    """

    def __init__(self, client: Optional[Client]):
        self.client = client

    def _require_client(self) -> Client:
        if self.client is None:
            logger.error("Grant store used without a Supabase client")
            raise UpstreamUnavailable("Supabase client not configured")
        return self.client

    def get_organization_grants(self, user_id: str) -> List[OrganizationGrant]:
        client = self._require_client()
        try:
            result = (
                client.table("user_schools")
                .select("user_id, school_id, role, active")
                .eq("user_id", user_id)
                .eq("active", True)
                .execute()
            )
        except Exception as e:
            raise upstream_error(e, "Failed to fetch school grants") from e

        return [organization_grant_from_row(row) for row in (result.data or [])]

    def get_module_grants(self, user_id: str) -> List[ModuleGrant]:
        client = self._require_client()
        try:
            result = (
                client.table("user_schools_modules")
                .select("user_id, school_id, module_id, role, active")
                .eq("user_id", user_id)
                .eq("active", True)
                .execute()
            )
        except Exception as e:
            raise upstream_error(e, "Failed to fetch module grants") from e

        return [module_grant_from_row(row) for row in (result.data or [])]

    def get_enabled_modules(self, organization_id: str) -> List[Module]:
        client = self._require_client()
        try:
            result = (
                client.table("school_modules")
                .select("module_id, enabled, modules(*)")
                .eq("school_id", organization_id)
                .eq("enabled", True)
                .execute()
            )
        except Exception as e:
            raise upstream_error(e, "Failed to fetch enabled modules") from e

        modules = []
        for row in (result.data or []):
            module_row = row.get("modules")
            if not module_row or not _is_active(row, "enabled"):
                continue
            modules.append(module_from_row(module_row))
        return modules

    def get_organization(self, organization_id: str) -> Optional[Organization]:
        client = self._require_client()
        try:
            result = (
                client.table("schools")
                .select("id, name, slug, active, deleted")
                .eq("id", organization_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise upstream_error(e, "Failed to fetch school") from e

        if not result.data:
            return None
        return organization_from_row(result.data[0])
