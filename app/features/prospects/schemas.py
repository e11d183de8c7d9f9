"""
Pydantic schemas for prospect responses.
"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from app.features.prospects.models import ProspectStatus


class ProspectResponse(BaseModel):
    """Schema for prospect response."""
    id: str
    workspace_id: str
    company: str
    contact: str | None = None
    position: str | None = None
    email: str | None = None
    phone: str | None = None
    status: ProspectStatus
    next_action: str | None = None
    notes: str | None = None
    created_by: str
    assigned_to: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AvailableActionsResponse(BaseModel):
    """What the caller may do with one prospect."""
    prospect_id: str
    can_view: bool
    can_edit: bool
    can_delete: bool
    can_assign: bool
