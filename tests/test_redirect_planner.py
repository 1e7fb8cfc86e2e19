# tests/test_redirect_planner.py

"""
Tests for post-login redirect planning.
"""

import pytest

from models.access import AccessUser, EffectiveModuleAccess, OrganizationAccess
from models.enums import RedirectKind
from services.navigation import destination_url
from services.redirect_planner import plan_redirect, plan_single_module_redirect


def org(org_id, modules=()):
    return OrganizationAccess(
        organization_id=org_id,
        organization_name=org_id,
        role="teacher",
        modules=[
            EffectiveModuleAccess(module_id=m, module_name=m, role="teacher", active=active)
            for m, active in modules
        ],
    )


def user(school=None, module=None):
    return AccessUser(id="u1", last_accessed_organization_id=school, last_accessed_module_id=module)


def test_no_schools_goes_to_setup():
    destination = plan_redirect(user("OrgA", "scheduler"), [])

    assert destination.kind == RedirectKind.school_setup
    assert destination.target == "setup"
    assert destination.organization_id is None


def test_single_school_without_preference():
    destination = plan_redirect(user(), [org("OrgA")])

    assert destination.kind == RedirectKind.module_selection
    assert destination.organization_id == "OrgA"


def test_preferred_school_and_module():
    catalog = [org("OrgA", [("scheduler", True)]), org("OrgB")]
    destination = plan_redirect(user("OrgA", "scheduler"), catalog)

    assert destination.kind == RedirectKind.direct_module
    assert destination.organization_id == "OrgA"
    assert destination.module_id == "scheduler"
    assert destination.target == "scheduler"


def test_stale_school_preference_with_many_schools():
    catalog = [org("OrgA"), org("OrgB")]
    destination = plan_redirect(user("OrgC"), catalog)

    assert destination.kind == RedirectKind.school_selection
    assert destination.organization_id is None


def test_stale_school_preference_with_one_school():
    destination = plan_redirect(user("OrgC", "scheduler"), [org("OrgA", [("scheduler", True)])])

    assert destination.kind == RedirectKind.module_selection
    assert destination.organization_id == "OrgA"


@pytest.mark.parametrize(
    "module_pref, modules",
    [
        (None, [("scheduler", True)]),
        ("lunch-menu", [("scheduler", True)]),
        ("scheduler", [("scheduler", False)]),
        ("scheduler", []),
    ],
)
def test_invalid_module_preference_falls_back_to_module_selection(module_pref, modules):
    catalog = [org("OrgA", modules), org("OrgB")]
    destination = plan_redirect(user("OrgA", module_pref), catalog)

    assert destination.kind == RedirectKind.module_selection
    assert destination.organization_id == "OrgA"
    assert destination.module_id is None


def test_module_preference_without_school_preference_is_ignored():
    catalog = [org("OrgA", [("scheduler", True)]), org("OrgB")]
    assert plan_redirect(user(None, "scheduler"), catalog).kind == RedirectKind.school_selection


def test_planning_is_repeatable():
    catalog = [org("OrgA", [("scheduler", True)]), org("OrgB")]
    u = user("OrgA", "scheduler")

    assert plan_redirect(u, catalog) == plan_redirect(u, catalog)


# ============================================================
# Single-module variant
# ============================================================
def test_single_module_goes_straight_to_module():
    catalog = [org("OrgA", [("scheduler", True)]), org("OrgB")]
    destination = plan_single_module_redirect(user("OrgA"), catalog, "scheduler")

    assert destination.kind == RedirectKind.direct_module
    assert destination.organization_id == "OrgA"
    assert destination.module_id == "scheduler"


def test_single_module_with_one_school_and_no_preference():
    destination = plan_single_module_redirect(user(), [org("OrgA")], "scheduler")

    assert destination.kind == RedirectKind.direct_module
    assert destination.organization_id == "OrgA"
    assert destination.module_id is None


def test_single_module_many_schools_no_preference():
    destination = plan_single_module_redirect(user(), [org("OrgA"), org("OrgB")], "scheduler")
    assert destination.kind == RedirectKind.school_selection


def test_single_module_no_schools():
    assert plan_single_module_redirect(user(), [], "scheduler").kind == RedirectKind.school_setup


# ============================================================
# Navigation URLs
# ============================================================
HOSTS = {"scheduler": "https://scheduler.example.test/"}


def url_for(destination):
    return destination_url(destination, "https://hub.example.test/", "https://hub.example.test/setup", HOSTS)


def test_destination_urls():
    assert url_for(plan_redirect(user(), [])) == "https://hub.example.test/setup"
    assert url_for(plan_redirect(user(), [org("A"), org("B")])) == "https://hub.example.test"
    assert url_for(plan_redirect(user(), [org("A")])) == "https://hub.example.test?school=A"

    direct = plan_redirect(user("A", "scheduler"), [org("A", [("scheduler", True)])])
    assert url_for(direct) == "https://scheduler.example.test?school=A"


def test_destination_url_unknown_module():
    direct = plan_redirect(user("A", "reports"), [org("A", [("reports", True)])])
    assert url_for(direct) is None
