"""
Pydantic schemas for the authenticated principal.
"""
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator

from app.features.permissions.engine import coerce_role
from app.features.permissions.matrix import Role


class Principal(BaseModel):
    """
    Identity of the caller as supplied by the session provider.

    An unknown or missing role claim is kept as None so every decision denies.
    """
    user_id: str = Field(..., min_length=1, description="Session user ID")
    role: Optional[Role] = Field(None, description="Role within the workspace")
    workspace_id: Optional[str] = Field(None, description="Current workspace")

    @field_validator("role", mode="before")
    @classmethod
    def unknown_role_is_none(cls, v: Any) -> Optional[Role]:
        return coerce_role(v)

    @classmethod
    def from_claims(cls, claims: dict) -> "Principal":
        return cls(
            user_id=str(claims["sub"]),
            role=claims.get("role"),
            workspace_id=claims.get("workspace_id"),
        )
