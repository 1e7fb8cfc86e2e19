# tests/test_grant_store.py

"""
Tests for the Supabase grant store and account store.
"""

import pytest
from unittest.mock import Mock

from core.account_store import load_access_user, update_last_accessed
from core.errors import UpstreamUnavailable
from core.grant_store import SupabaseGrantStore


def supabase_returning(data):
    """Mock client whose every query chain ends in `data`."""
    mock_client = Mock()
    mock_query = Mock()
    mock_query.select.return_value = mock_query
    mock_query.eq.return_value = mock_query
    mock_query.limit.return_value = mock_query
    mock_query.update.return_value = mock_query
    mock_query.execute.return_value = Mock(data=data)
    mock_client.table.return_value = mock_query
    return mock_client


def supabase_failing(message="connection refused"):
    mock_client = supabase_returning([])
    mock_client.table.return_value.execute.side_effect = Exception(message)
    return mock_client


def test_organization_grants_mapped():
    client = supabase_returning([
        {"user_id": "u1", "school_id": "OrgA", "role": "admin", "active": True},
        {"user_id": "u1", "school_id": "OrgB", "role": "teacher", "active": None},
    ])

    grants = SupabaseGrantStore(client).get_organization_grants("u1")

    client.table.assert_called_with("user_schools")
    assert grants[0].organization_id == "OrgA"
    assert grants[0].active is True
    # anything not explicitly active counts as inactive
    assert grants[1].active is False


def test_module_grants_mapped():
    client = supabase_returning([
        {"user_id": "u1", "school_id": "OrgA", "module_id": "m1", "role": "admin", "active": True},
    ])

    grants = SupabaseGrantStore(client).get_module_grants("u1")

    client.table.assert_called_with("user_schools_modules")
    assert grants[0].module_id == "m1"
    assert grants[0].role == "admin"


def test_enabled_modules_mapped():
    client = supabase_returning([
        {
            "module_id": "m1",
            "enabled": True,
            "modules": {
                "id": "m1",
                "name": "scheduler",
                "display_name": "Lesson Scheduler",
                "role_hierarchy": ["teacher", "admin", "superadmin"],
                "is_active": True,
            },
        },
        {"module_id": "m2", "enabled": True, "modules": None},
    ])

    modules = SupabaseGrantStore(client).get_enabled_modules("OrgA")

    assert len(modules) == 1
    assert modules[0].name == "scheduler"
    assert modules[0].role_hierarchy == ["teacher", "admin", "superadmin"]
    assert modules[0].active is True


def test_deleted_school_is_inactive():
    client = supabase_returning([{"id": "OrgA", "name": "Alpha", "active": True, "deleted": True}])

    organization = SupabaseGrantStore(client).get_organization("OrgA")
    assert organization.active is False


def test_missing_school_returns_none():
    assert SupabaseGrantStore(supabase_returning([])).get_organization("OrgA") is None


@pytest.mark.parametrize(
    "call",
    [
        lambda s: s.get_organization_grants("u1"),
        lambda s: s.get_module_grants("u1"),
        lambda s: s.get_enabled_modules("OrgA"),
        lambda s: s.get_organization("OrgA"),
    ],
)
def test_failures_raise_upstream_unavailable(call):
    with pytest.raises(UpstreamUnavailable):
        call(SupabaseGrantStore(supabase_failing()))


def test_unconfigured_client_raises_upstream_unavailable():
    with pytest.raises(UpstreamUnavailable):
        SupabaseGrantStore(None).get_organization_grants("u1")


# ============================================================
# Account store
# ============================================================
def test_load_access_user_reads_preferences():
    client = supabase_returning([
        {"id": "u1", "email": "t@example.com", "last_accessed_school_id": "OrgA", "last_accessed_module": "scheduler"},
    ])

    user = load_access_user(client, "u1")

    assert user.last_accessed_organization_id == "OrgA"
    assert user.last_accessed_module_id == "scheduler"


def test_load_access_user_without_row():
    user = load_access_user(supabase_returning([]), "u1", email="t@example.com")

    assert user.email == "t@example.com"
    assert user.last_accessed_organization_id is None


def test_update_last_accessed():
    client = supabase_returning([])

    update_last_accessed(client, "u1", "OrgA", "scheduler")

    client.table.assert_called_with("users")
    client.table.return_value.update.assert_called_with(
        {"last_accessed_school_id": "OrgA", "last_accessed_module": "scheduler"}
    )


def test_update_last_accessed_failure():
    with pytest.raises(UpstreamUnavailable):
        update_last_accessed(supabase_failing(), "u1", "OrgA")
    with pytest.raises(UpstreamUnavailable):
        update_last_accessed(None, "u1", "OrgA")
