"""
Pydantic schemas for permission queries.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, model_validator

from app.features.permissions.matrix import Permission, Role


class PermissionCheckRequest(BaseModel):
    """
    A point decision to evaluate for the caller.

    Either `permission` or both `action` and `resource` must be given.
    Values are plain strings; unknown ones are denied, not rejected.
    """
    permission: Optional[str] = Field(None, description="Permission token, e.g. 'prospects:assign'")
    action: Optional[str] = Field(None, description="create, read, update, delete or assign")
    resource: Optional[str] = Field(None, description="prospects, users, workspaces or settings")
    is_owner: bool = Field(False, description="Caller created the target record")
    is_assigned: bool = Field(False, description="Target record is assigned to the caller")

    @model_validator(mode="after")
    def permission_or_action(self) -> "PermissionCheckRequest":
        if self.permission is None and (self.action is None or self.resource is None):
            raise ValueError("Provide either permission, or action and resource")
        return self


class PermissionCheckResponse(BaseModel):
    allowed: bool
    reason: Optional[str] = None


class PrincipalPermissionsResponse(BaseModel):
    """What the caller may do, for driving UI affordances."""
    user_id: str
    role: Optional[Role]
    workspace_id: Optional[str]
    permissions: List[Permission] = []
    routes: List[str] = []


class PermissionMatrixResponse(BaseModel):
    roles: Dict[Role, List[Permission]]


class RouteAccessResponse(BaseModel):
    route: str
    allowed: bool
