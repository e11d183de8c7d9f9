from types import MappingProxyType

import pytest

from app.features.permissions.engine import (
    NO_OWNERSHIP,
    OwnershipContext,
    accessible_routes,
    can_access_route,
    can_perform,
    evaluate_gate,
    get_permissions,
    has_permission,
    is_admin,
    is_agent,
    is_manager,
    role_in,
)
from app.features.permissions.matrix import (
    PERMISSION_MATRIX,
    Action,
    Permission,
    Resource,
    Role,
)

ALL_ROLES = list(Role)
ALL_PERMISSIONS = list(Permission)
OWNER = OwnershipContext(is_owner=True, is_assigned=False)
ASSIGNED = OwnershipContext(is_owner=False, is_assigned=True)


# ---------------------------------------------------------------------------
# Matrix invariants
# ---------------------------------------------------------------------------

def test_matrix_is_read_only() -> None:
    assert isinstance(PERMISSION_MATRIX, MappingProxyType)
    with pytest.raises(TypeError):
        PERMISSION_MATRIX[Role.AGENT] = frozenset()  # type: ignore[index]
    assert isinstance(PERMISSION_MATRIX[Role.AGENT], frozenset)


def test_super_admin_is_superset_of_admin() -> None:
    assert PERMISSION_MATRIX[Role.ADMIN] <= PERMISSION_MATRIX[Role.SUPER_ADMIN]


def test_manager_and_agent_are_not_nested() -> None:
    manager = PERMISSION_MATRIX[Role.MANAGER]
    agent = PERMISSION_MATRIX[Role.AGENT]
    assert not manager <= agent
    assert not agent <= manager
    assert Permission.PROSPECTS_READ_ALL in manager - agent
    assert Permission.PROSPECTS_READ_ASSIGNED in agent - manager


# ---------------------------------------------------------------------------
# has_permission / get_permissions
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("permission", ALL_PERMISSIONS)
def test_no_role_never_has_permission(permission: Permission) -> None:
    assert has_permission(None, permission) is False


@pytest.mark.parametrize("permission", ALL_PERMISSIONS)
def test_super_admin_has_every_permission(permission: Permission) -> None:
    assert has_permission(Role.SUPER_ADMIN, permission) is True


@pytest.mark.parametrize("role", ALL_ROLES)
def test_enumeration_matches_point_lookup(role: Role) -> None:
    granted = get_permissions(role)
    for permission in ALL_PERMISSIONS:
        assert has_permission(role, permission) is (permission in granted)


def test_string_inputs_are_accepted() -> None:
    assert has_permission("manager", "prospects:assign") is True
    assert has_permission("agent", "prospects:assign") is False


@pytest.mark.parametrize("role", [None, "", "owner", "ADMIN", 42, ["admin"]])
def test_unknown_roles_get_nothing(role) -> None:
    assert get_permissions(role) == frozenset()
    assert has_permission(role, Permission.SETTINGS_READ) is False
    assert can_perform(role, Action.CREATE, Resource.PROSPECTS) is False


def test_unknown_permission_is_denied() -> None:
    assert has_permission(Role.SUPER_ADMIN, "prospects:explode") is False
    assert has_permission(Role.ADMIN, None) is False


# ---------------------------------------------------------------------------
# can_perform on prospects
# ---------------------------------------------------------------------------

def test_admin_deletes_unconditionally() -> None:
    assert can_perform(Role.ADMIN, Action.DELETE, Resource.PROSPECTS, ASSIGNED) is True
    assert can_perform(Role.ADMIN, Action.DELETE, Resource.PROSPECTS, NO_OWNERSHIP) is True


def test_assigned_agent_may_edit_but_not_delete() -> None:
    assert can_perform(Role.AGENT, Action.UPDATE, Resource.PROSPECTS, ASSIGNED) is True
    assert can_perform(Role.AGENT, Action.DELETE, Resource.PROSPECTS, ASSIGNED) is False


def test_assigned_manager_may_edit_but_not_delete() -> None:
    assert can_perform(Role.MANAGER, Action.UPDATE, Resource.PROSPECTS, ASSIGNED) is True
    assert can_perform(Role.MANAGER, Action.DELETE, Resource.PROSPECTS, ASSIGNED) is False


@pytest.mark.parametrize("role", [Role.MANAGER, Role.AGENT])
def test_owner_may_edit_and_delete(role: Role) -> None:
    assert can_perform(role, Action.UPDATE, Resource.PROSPECTS, OWNER) is True
    assert can_perform(role, Action.DELETE, Resource.PROSPECTS, OWNER) is True


@pytest.mark.parametrize("role", [Role.MANAGER, Role.AGENT])
def test_no_ownership_means_no_edit_or_delete(role: Role) -> None:
    assert can_perform(role, Action.UPDATE, Resource.PROSPECTS) is False
    assert can_perform(role, Action.DELETE, Resource.PROSPECTS) is False


def test_malformed_context_counts_as_no_ownership() -> None:
    context = {"is_owner": True, "is_assigned": True}
    assert can_perform(Role.AGENT, Action.UPDATE, Resource.PROSPECTS, context) is False  # type: ignore[arg-type]


@pytest.mark.parametrize("role", ALL_ROLES)
def test_everyone_may_create_prospects(role: Role) -> None:
    assert can_perform(role, Action.CREATE, Resource.PROSPECTS) is True


def test_read_scope_per_role() -> None:
    for role in ALL_ROLES:
        assert can_perform(role, Action.READ, Resource.PROSPECTS) is True
    assert has_permission(Role.AGENT, Permission.PROSPECTS_READ_ALL) is False


@pytest.mark.parametrize(
    "role, expected",
    [
        (Role.SUPER_ADMIN, True),
        (Role.ADMIN, True),
        (Role.MANAGER, True),
        (Role.AGENT, False),
    ],
)
def test_assign_is_role_level(role: Role, expected: bool) -> None:
    assert can_perform(role, Action.ASSIGN, Resource.PROSPECTS, OWNER) is expected
    assert can_perform(role, Action.ASSIGN, Resource.PROSPECTS, NO_OWNERSHIP) is expected


# ---------------------------------------------------------------------------
# can_perform on other resources
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "role, action, resource, expected",
    [
        (Role.ADMIN, Action.CREATE, Resource.USERS, True),
        (Role.MANAGER, Action.READ, Resource.USERS, True),
        (Role.MANAGER, Action.UPDATE, Resource.USERS, False),
        (Role.AGENT, Action.READ, Resource.USERS, False),
        (Role.ADMIN, Action.CREATE, Resource.WORKSPACES, False),
        (Role.ADMIN, Action.UPDATE, Resource.WORKSPACES, True),
        (Role.AGENT, Action.READ, Resource.SETTINGS, True),
        (Role.AGENT, Action.UPDATE, Resource.SETTINGS, False),
    ],
)
def test_flat_resource_lookups(role, action, resource, expected) -> None:
    assert can_perform(role, action, resource) is expected


def test_pairs_without_a_token_are_denied() -> None:
    assert can_perform(Role.ADMIN, Action.CREATE, Resource.SETTINGS) is False
    assert can_perform(Role.ADMIN, Action.ASSIGN, Resource.USERS) is False


def test_super_admin_short_circuits() -> None:
    assert can_perform(Role.SUPER_ADMIN, Action.DELETE, Resource.PROSPECTS) is True
    assert can_perform(Role.SUPER_ADMIN, Action.CREATE, Resource.SETTINGS) is True
    assert can_perform("super_admin", "delete", "workspaces") is True


def test_unknown_action_or_resource_is_denied_even_for_super_admin() -> None:
    assert can_perform(Role.SUPER_ADMIN, "archive", Resource.PROSPECTS) is False
    assert can_perform(Role.SUPER_ADMIN, Action.READ, "invoices") is False


def test_decisions_are_repeatable() -> None:
    first = [can_perform(r, a, Resource.PROSPECTS, ASSIGNED) for r in Role for a in Action]
    second = [can_perform(r, a, Resource.PROSPECTS, ASSIGNED) for r in Role for a in Action]
    assert first == second


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "role, route, expected",
    [
        (Role.AGENT, "/crm", True),
        (Role.AGENT, "/dashboard", True),
        (Role.AGENT, "/users", False),
        (Role.MANAGER, "/users", True),
        (Role.AGENT, "/settings", True),
        (Role.ADMIN, "/workspaces", False),
        (Role.SUPER_ADMIN, "/workspaces", True),
    ],
)
def test_registered_routes(role, route, expected) -> None:
    assert can_access_route(role, route) is expected


def test_no_role_cannot_open_any_route() -> None:
    assert can_access_route(None, "/crm") is False
    assert can_access_route(None, "/login") is False
    assert can_access_route(None, "/anything", allow_unregistered=True) is False


def test_public_routes_are_open_to_every_role() -> None:
    for role in ALL_ROLES:
        assert can_access_route(role, "/login") is True


def test_unregistered_routes_are_denied_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("app.core.config.ALLOW_UNREGISTERED_ROUTES", False)
    assert can_access_route(Role.SUPER_ADMIN, "/reports") is False


def test_unregistered_routes_can_fall_back_to_public(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("app.core.config.ALLOW_UNREGISTERED_ROUTES", True)
    assert can_access_route(Role.AGENT, "/reports") is True
    assert can_access_route(Role.AGENT, "/reports", allow_unregistered=False) is False


@pytest.mark.parametrize("route", [["/crm"], None, 42, {"path": "/crm"}])
def test_malformed_route_is_denied(route) -> None:
    assert can_access_route(Role.SUPER_ADMIN, route) is False
    assert can_access_route(Role.AGENT, route, allow_unregistered=True) is False


def test_accessible_routes_for_agent() -> None:
    assert accessible_routes(Role.AGENT) == ["/", "/crm", "/dashboard", "/login", "/settings", "/unauthorized"]
    assert accessible_routes(None) == []


# ---------------------------------------------------------------------------
# Role helpers and gates
# ---------------------------------------------------------------------------

def test_role_helpers() -> None:
    assert is_admin(Role.SUPER_ADMIN) and is_admin("admin")
    assert not is_admin(Role.MANAGER)
    assert is_manager(Role.ADMIN) and is_manager(Role.MANAGER)
    assert not is_manager(Role.AGENT)
    assert is_agent("agent") and not is_agent(Role.MANAGER)
    assert role_in(None, [None, Role.AGENT]) is False


def test_gate_without_conditions_is_open() -> None:
    assert evaluate_gate(Role.AGENT) is True


def test_gate_any_mode() -> None:
    assert evaluate_gate(
        Role.AGENT,
        permission=Permission.USERS_CREATE,
        allowed_roles=[Role.AGENT],
    ) is True
    assert evaluate_gate(
        Role.AGENT,
        permission=Permission.USERS_CREATE,
        allowed_roles=[Role.ADMIN],
    ) is False


def test_gate_all_mode_with_ownership() -> None:
    assert evaluate_gate(
        Role.AGENT,
        action=Action.DELETE,
        resource=Resource.PROSPECTS,
        context=OWNER,
        allowed_roles=[Role.AGENT, Role.MANAGER],
        mode="all",
    ) is True
    assert evaluate_gate(
        Role.AGENT,
        action=Action.DELETE,
        resource=Resource.PROSPECTS,
        context=ASSIGNED,
        allowed_roles=[Role.AGENT, Role.MANAGER],
        mode="all",
    ) is False


def test_gate_denies_no_role_and_unknown_mode() -> None:
    assert evaluate_gate(None, permission=Permission.SETTINGS_READ) is False
    assert evaluate_gate(Role.ADMIN, permission=Permission.SETTINGS_READ, mode="some") is False  # type: ignore[arg-type]
