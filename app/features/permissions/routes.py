"""
Permission query API routes.

Read-only endpoints that expose the caller's decisions to the UI layer.
The UI may use them to show or hide affordances; the guards and the
prospect facade re-check at the point of action.
"""
from fastapi import APIRouter, Depends

from app.features.permissions.dependencies import require_admin
from app.features.permissions.engine import (
    OwnershipContext,
    accessible_routes,
    can_access_route,
    can_perform,
    get_permissions,
    has_permission,
)
from app.features.permissions.matrix import PERMISSION_MATRIX
from app.features.permissions.schemas import (
    PermissionCheckRequest,
    PermissionCheckResponse,
    PermissionMatrixResponse,
    PrincipalPermissionsResponse,
    RouteAccessResponse,
)
from app.features.users.dependencies import get_current_principal
from app.features.users.schemas import Principal


router = APIRouter()


def _sorted(permissions) -> list:
    return sorted(permissions, key=lambda p: p.value)


@router.get("/me", response_model=PrincipalPermissionsResponse)
async def get_my_permissions(
    principal: Principal = Depends(get_current_principal)
):
    """Permissions and accessible routes of the current user."""
    return PrincipalPermissionsResponse(
        user_id=principal.user_id,
        role=principal.role,
        workspace_id=principal.workspace_id,
        permissions=_sorted(get_permissions(principal.role)),
        routes=accessible_routes(principal.role),
    )


@router.get("/matrix", response_model=PermissionMatrixResponse)
async def get_permission_matrix(
    principal: Principal = Depends(require_admin)
):
    """The full role → permission matrix (admin only)."""
    return PermissionMatrixResponse(
        roles={role: _sorted(permissions) for role, permissions in PERMISSION_MATRIX.items()}
    )


@router.post("/check", response_model=PermissionCheckResponse)
async def check_permission(
    check: PermissionCheckRequest,
    principal: Principal = Depends(get_current_principal)
):
    """
    Evaluate a permission token, or an action on a resource type with
    caller-supplied ownership flags.
    """
    if principal.role is None:
        return PermissionCheckResponse(allowed=False, reason="No role configured for this user")

    if check.permission is not None:
        allowed = has_permission(principal.role, check.permission)
        subject = check.permission
    else:
        context = OwnershipContext(is_owner=check.is_owner, is_assigned=check.is_assigned)
        allowed = can_perform(principal.role, check.action, check.resource, context)
        subject = f"{check.action} on {check.resource}"

    return PermissionCheckResponse(
        allowed=allowed,
        reason=None if allowed else f"{principal.role.value} may not {subject}",
    )


@router.get("/routes", response_model=RouteAccessResponse)
async def check_route(
    route: str,
    principal: Principal = Depends(get_current_principal)
):
    """Whether the current user may open a UI route."""
    return RouteAccessResponse(route=route, allowed=can_access_route(principal.role, route))
