"""
Role gates for FastAPI routes.

Implements:
- Role-based route guards (super admin, admin, manager, agent)
- Permission guards (all-of / any-of)
- Action-on-resource and page-route guards

Every guard returns the current principal when access is granted and
raises 403 otherwise.
"""
from typing import Annotated, Literal
from fastapi import Depends, HTTPException, status

from app.features.permissions.engine import (
    can_access_route,
    can_perform,
    has_permission,
    role_in,
)
from app.features.permissions.matrix import Action, Permission, Resource, Role
from app.features.users.dependencies import get_current_principal
from app.features.users.schemas import Principal
from app.utils import get_logger


log = get_logger(__name__)


def _forbid(principal: Principal, detail: str) -> HTTPException:
    log.info(f"User {principal.user_id} ({principal.role}) refused: {detail}")
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def _ensure_role(principal: Principal) -> None:
    if principal.role is None:
        raise _forbid(principal, "No role configured for this user")


def require_role(*roles: Role):
    """
    FastAPI dependency to require one of the given roles.

    Usage:
        @router.get("/workspaces")
        async def list_workspaces(
            principal: Principal = Depends(require_role(Role.SUPER_ADMIN))
        ):
            pass
    """
    async def role_dependency(
        principal: Annotated[Principal, Depends(get_current_principal)]
    ) -> Principal:
        _ensure_role(principal)
        if not role_in(principal.role, roles):
            raise _forbid(principal, f"Role not allowed: requires one of {[r.value for r in roles]}")
        return principal

    return role_dependency


require_super_admin = require_role(Role.SUPER_ADMIN)
require_admin = require_role(Role.SUPER_ADMIN, Role.ADMIN)
require_manager = require_role(Role.SUPER_ADMIN, Role.ADMIN, Role.MANAGER)
require_agent = require_role(Role.SUPER_ADMIN, Role.ADMIN, Role.MANAGER, Role.AGENT)


def require_permissions(*permissions: Permission, mode: Literal["all", "any"] = "all"):
    """
    FastAPI dependency to require permission tokens.

    Usage:
        @router.get("/users")
        async def list_users(
            principal: Principal = Depends(require_permissions(Permission.USERS_READ))
        ):
            pass

    Args:
        permissions: Permission tokens to check
        mode: "all" requires every token, "any" requires at least one
    """
    async def permission_dependency(
        principal: Annotated[Principal, Depends(get_current_principal)]
    ) -> Principal:
        _ensure_role(principal)
        checks = [has_permission(principal.role, permission) for permission in permissions]
        granted = all(checks) if mode == "all" else any(checks)
        if not granted:
            raise _forbid(
                principal,
                f"Permission denied: requires {mode} of {[p.value for p in permissions]}",
            )
        return principal

    return permission_dependency


def require_action(action: Action, resource: Resource):
    """
    FastAPI dependency to require an action on a resource type.

    No ownership context is available at this level, so ownership-dependent
    prospect actions (update, delete) pass only for roles that hold them
    unconditionally. Check those per record with the prospect facade.
    """
    async def action_dependency(
        principal: Annotated[Principal, Depends(get_current_principal)]
    ) -> Principal:
        _ensure_role(principal)
        if not can_perform(principal.role, action, resource):
            raise _forbid(principal, f"Permission denied: {action.value} on {resource.value}")
        return principal

    return action_dependency


def require_route(route: str):
    """FastAPI dependency guarding a UI page route."""
    async def route_dependency(
        principal: Annotated[Principal, Depends(get_current_principal)]
    ) -> Principal:
        _ensure_role(principal)
        if not can_access_route(principal.role, route):
            raise _forbid(principal, f"Access denied to {route}")
        return principal

    return route_dependency
