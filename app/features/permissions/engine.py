"""
Authorization decisions over the static permission matrix.

Every function here is pure and total: unknown or missing input (no role,
an unrecognised role string, an unknown permission, action, resource or
route) is answered with a denial, never with an exception.
"""
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, Literal, Optional

from app.core import config
from app.features.permissions.matrix import (
    Action,
    Permission,
    Resource,
    Role,
    FLAT_ACTION_PERMISSIONS,
    PERMISSION_MATRIX,
    PUBLIC_ROUTES,
    ROUTE_PERMISSIONS,
)
from app.utils import get_logger


log = get_logger(__name__)

GateMode = Literal["any", "all"]


# ============================================================================
# Input coercion
# ============================================================================

def _coerce(enum_cls, value):
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        return None


def coerce_role(value: Any) -> Optional[Role]:
    """Return the Role for `value`, or None if it is missing or unrecognised."""
    return _coerce(Role, value)


def coerce_permission(value: Any) -> Optional[Permission]:
    return _coerce(Permission, value)


def coerce_action(value: Any) -> Optional[Action]:
    return _coerce(Action, value)


def coerce_resource(value: Any) -> Optional[Resource]:
    return _coerce(Resource, value)


def read_field(obj: Any, name: str) -> Any:
    """Read `name` from a mapping or an attribute-bearing object; None when absent."""
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


# ============================================================================
# Ownership context
# ============================================================================

@dataclass(frozen=True)
class OwnershipContext:
    """
    Ownership facts of one resource relative to the current user.

    Both flags are always populated. Build one per decision with
    `for_resource`; never cache it.
    """
    is_owner: bool
    is_assigned: bool

    @classmethod
    def for_resource(cls, resource: Any, user_id: Optional[str]) -> "OwnershipContext":
        if not user_id:
            return NO_OWNERSHIP
        created_by = read_field(resource, "created_by")
        assigned_to = read_field(resource, "assigned_to")
        return cls(
            is_owner=created_by is not None and created_by == user_id,
            is_assigned=assigned_to is not None and assigned_to == user_id,
        )


NO_OWNERSHIP = OwnershipContext(is_owner=False, is_assigned=False)


# ============================================================================
# Decisions
# ============================================================================

def get_permissions(role: Any) -> frozenset[Permission]:
    """Full permission set of a role; empty for a missing or unknown role."""
    resolved = coerce_role(role)
    if resolved is None:
        return frozenset()
    return PERMISSION_MATRIX[resolved]


def has_permission(role: Any, permission: Any) -> bool:
    """True iff `role` holds the `permission` token."""
    resolved_role = coerce_role(role)
    resolved_permission = coerce_permission(permission)
    if resolved_role is None or resolved_permission is None:
        return False
    return resolved_permission in PERMISSION_MATRIX[resolved_role]


def _prospect_permission(
    role: Role,
    action: Action,
    context: OwnershipContext,
) -> Optional[Permission]:
    """Token to check for a prospect action, or None when the action is refused outright."""
    if action is Action.CREATE:
        return Permission.PROSPECTS_CREATE

    if action is Action.READ:
        if role is Role.AGENT:
            return Permission.PROSPECTS_READ_ASSIGNED
        return Permission.PROSPECTS_READ_ALL

    if action is Action.UPDATE:
        if role is Role.ADMIN:
            return Permission.PROSPECTS_UPDATE
        if context.is_owner or context.is_assigned:
            if role is Role.MANAGER:
                return Permission.PROSPECTS_UPDATE_OWN
            return Permission.PROSPECTS_UPDATE_ASSIGNED
        return None

    if action is Action.DELETE:
        if role is Role.ADMIN:
            return Permission.PROSPECTS_DELETE
        # Assignment alone never grants delete
        if context.is_owner:
            return Permission.PROSPECTS_DELETE_OWN
        return None

    if action is Action.ASSIGN:
        return Permission.PROSPECTS_ASSIGN

    return None


def can_perform(
    role: Any,
    action: Any,
    resource: Any,
    context: Optional[OwnershipContext] = None,
) -> bool:
    """
    Decide whether `role` may perform `action` on `resource`.

    Prospects combine the role's tokens with the ownership context:
    update needs ownership or assignment (admin excepted), delete needs
    ownership (admin excepted). Other resources are a flat token lookup.

    Args:
        role: Role or role string from the session
        action: create, read, update, delete or assign
        resource: prospects, users, workspaces or settings
        context: ownership facts for the target record, all-false if omitted

    Returns:
        True if allowed, False otherwise
    """
    resolved_role = coerce_role(role)
    resolved_action = coerce_action(action)
    resolved_resource = coerce_resource(resource)
    if resolved_role is None or resolved_action is None or resolved_resource is None:
        log.debug(f"Denied {action!r} on {resource!r}: unrecognised role, action or resource")
        return False

    if resolved_role is Role.SUPER_ADMIN:
        return True

    if not isinstance(context, OwnershipContext):
        context = NO_OWNERSHIP

    if resolved_resource is Resource.PROSPECTS:
        permission = _prospect_permission(resolved_role, resolved_action, context)
    else:
        permission = FLAT_ACTION_PERMISSIONS.get((resolved_resource, resolved_action))

    if permission is None:
        log.debug(
            f"Role {resolved_role.value} denied {resolved_action.value} on {resolved_resource.value} "
            f"(owner={context.is_owner}, assigned={context.is_assigned})"
        )
        return False

    allowed = permission in PERMISSION_MATRIX[resolved_role]
    log.debug(
        f"Role {resolved_role.value} {'granted' if allowed else 'denied'} "
        f"{resolved_action.value} on {resolved_resource.value} via {permission.value}"
    )
    return allowed


def can_access_route(role: Any, route: str, *, allow_unregistered: Optional[bool] = None) -> bool:
    """
    Decide whether `role` may open `route`.

    Registered routes require any one of their permissions. Public routes
    are open to every recognised role. Any other route is denied unless
    `allow_unregistered` (defaulting to config.ALLOW_UNREGISTERED_ROUTES)
    is set.
    """
    resolved_role = coerce_role(role)
    if resolved_role is None or not isinstance(route, str):
        return False

    required = ROUTE_PERMISSIONS.get(route)
    if required is None:
        if route in PUBLIC_ROUTES:
            return True
        if allow_unregistered is None:
            allow_unregistered = config.ALLOW_UNREGISTERED_ROUTES
        if not allow_unregistered:
            log.debug(f"Route {route!r} is not registered - denied for {resolved_role.value}")
        return bool(allow_unregistered)

    return any(permission in PERMISSION_MATRIX[resolved_role] for permission in required)


def accessible_routes(role: Any) -> list[str]:
    """Registered and public routes the role may open, sorted."""
    routes = set(ROUTE_PERMISSIONS) | PUBLIC_ROUTES
    return sorted(route for route in routes if can_access_route(role, route, allow_unregistered=False))


# ============================================================================
# Role helpers and composite gates
# ============================================================================

def role_in(role: Any, allowed_roles: Iterable[Any]) -> bool:
    resolved = coerce_role(role)
    if resolved is None:
        return False
    return resolved in {coerce_role(allowed) for allowed in allowed_roles}


def is_admin(role: Any) -> bool:
    return role_in(role, (Role.SUPER_ADMIN, Role.ADMIN))


def is_manager(role: Any) -> bool:
    return role_in(role, (Role.SUPER_ADMIN, Role.ADMIN, Role.MANAGER))


def is_agent(role: Any) -> bool:
    return coerce_role(role) is Role.AGENT


def evaluate_gate(
    role: Any,
    *,
    permission: Any = None,
    action: Any = None,
    resource: Any = None,
    context: Optional[OwnershipContext] = None,
    allowed_roles: Optional[Iterable[Any]] = None,
    mode: GateMode = "any",
) -> bool:
    """
    Combine a permission, an action on a resource and a role list into one decision.

    Only the conditions that are supplied take part. With mode "all" every
    supplied condition must hold; with mode "any" one is enough. A gate with
    no conditions is open. An unknown mode denies.
    """
    conditions = []
    if permission is not None:
        conditions.append(has_permission(role, permission))
    if action is not None and resource is not None:
        conditions.append(can_perform(role, action, resource, context))
    if allowed_roles is not None:
        conditions.append(role_in(role, allowed_roles))

    if not conditions:
        return True
    if mode == "all":
        return all(conditions)
    if mode == "any":
        return any(conditions)
    return False
