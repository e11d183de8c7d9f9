"""
Permission feature module.

Static role → permission matrix for the CRM and the decision functions built
on it. Every decision fails closed.
"""
from app.features.permissions.matrix import (
    Action,
    Permission,
    Resource,
    Role,
    PERMISSION_MATRIX,
    ROUTE_PERMISSIONS,
    PUBLIC_ROUTES,
)
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

__all__ = [
    "Action",
    "Permission",
    "Resource",
    "Role",
    "PERMISSION_MATRIX",
    "ROUTE_PERMISSIONS",
    "PUBLIC_ROUTES",
    "NO_OWNERSHIP",
    "OwnershipContext",
    "accessible_routes",
    "can_access_route",
    "can_perform",
    "evaluate_gate",
    "get_permissions",
    "has_permission",
    "is_admin",
    "is_agent",
    "is_manager",
    "role_in",
]
