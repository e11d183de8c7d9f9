"""
Prospect feature module.

Ownership-aware authorization for the CRM's sales leads: per-record edit and
delete checks, visibility filtering and assignment targets.
"""
from app.features.prospects.access import (
    AvailableActions,
    can_delete_prospect,
    can_modify_prospect,
    filter_prospects,
    get_assignable_users,
    get_available_actions,
)

__all__ = [
    "AvailableActions",
    "can_delete_prospect",
    "can_modify_prospect",
    "filter_prospects",
    "get_assignable_users",
    "get_available_actions",
]
