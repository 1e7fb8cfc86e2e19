# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import pytest
from fastapi.testclient import TestClient
from typing import Dict, Generator, List, Optional
from unittest.mock import Mock

from main import create_app
from core.errors import UpstreamUnavailable
from dependencies.auth import get_account_client, get_current_user, get_grant_store
from models.access import AccessUser, Module, ModuleGrant, Organization, OrganizationGrant


SCHEDULER_HIERARCHY = ["teacher", "admin", "superadmin"]


class FakeGrantStore:
    """In-memory GrantStore used by the service and router tests."""

    def __init__(self):
        self.organizations: Dict[str, Organization] = {}
        self.enabled_modules: Dict[str, List[Module]] = {}
        self.org_grants: List[OrganizationGrant] = []
        self.module_grants: List[ModuleGrant] = []
        self.fail_on: Optional[str] = None

    # -- builders -------------------------------------------------
    def add_organization(self, org_id: str, name: Optional[str] = None, active: bool = True, modules=None):
        self.organizations[org_id] = Organization(id=org_id, name=name or org_id, active=active)
        self.enabled_modules[org_id] = list(modules or [])
        return self

    def grant_school(self, user_id: str, org_id: str, role: str, active: bool = True):
        self.org_grants.append(
            OrganizationGrant(user_id=user_id, organization_id=org_id, role=role, active=active)
        )
        return self

    def grant_module(self, user_id: str, org_id: str, module_id: str, role: str, active: bool = True):
        self.module_grants.append(
            ModuleGrant(user_id=user_id, organization_id=org_id, module_id=module_id, role=role, active=active)
        )
        return self

    def _check(self, operation: str):
        if self.fail_on == operation:
            raise UpstreamUnavailable(f"{operation} failed")

    # -- GrantStore protocol ----------------------------------------
    def get_organization_grants(self, user_id: str) -> List[OrganizationGrant]:
        self._check("get_organization_grants")
        return [g for g in self.org_grants if g.user_id == user_id]

    def get_module_grants(self, user_id: str) -> List[ModuleGrant]:
        self._check("get_module_grants")
        return [g for g in self.module_grants if g.user_id == user_id]

    def get_enabled_modules(self, organization_id: str) -> List[Module]:
        self._check("get_enabled_modules")
        return list(self.enabled_modules.get(organization_id, []))

    def get_organization(self, organization_id: str) -> Optional[Organization]:
        self._check("get_organization")
        return self.organizations.get(organization_id)


def make_module(module_id: str, name: Optional[str] = None, active: bool = True) -> Module:
    return Module(
        id=module_id,
        name=name or module_id,
        role_hierarchy=SCHEDULER_HIERARCHY,
        active=active,
    )


@pytest.fixture
def grant_store() -> FakeGrantStore:
    return FakeGrantStore()


@pytest.fixture
def scheduler_module() -> Module:
    return make_module("scheduler")


@pytest.fixture
def mock_current_user() -> AccessUser:
    """Create a mock current user for testing."""
    return AccessUser(id="test-user-id", email="test@example.com")


@pytest.fixture
def mock_account_client():
    """Create a mock Supabase client for preference writes."""
    mock_client = Mock()
    mock_table = Mock()
    mock_client.table.return_value = mock_table
    return mock_client


@pytest.fixture(scope="function")
def app(grant_store, mock_current_user, mock_account_client):
    """Create a test FastAPI application with auth and stores overridden."""
    application = create_app()
    application.dependency_overrides[get_current_user] = lambda: mock_current_user
    application.dependency_overrides[get_grant_store] = lambda: grant_store
    application.dependency_overrides[get_account_client] = lambda: mock_account_client
    return application


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def reset_local_stores():
    """Reset the session mirror stores before each test."""
    from core.local_store import clear_local_stores
    clear_local_stores()
    yield
    clear_local_stores()
