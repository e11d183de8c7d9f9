"""
Ownership-aware authorization for prospects.

Wraps the decision engine with per-record helpers. A prospect is any object
or mapping exposing `created_by` and `assigned_to`; both are only read.
Ownership is recomputed on every call.
"""
from dataclasses import asdict, dataclass
from typing import Any, Iterable, Optional, TypeVar

from app.features.permissions.engine import (
    OwnershipContext,
    can_perform,
    coerce_role,
    has_permission,
    read_field,
)
from app.features.permissions.matrix import Action, Permission, Resource, Role
from app.utils import get_logger


log = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class AvailableActions:
    """Per-record affordances for the UI."""
    can_view: bool
    can_edit: bool
    can_delete: bool
    can_assign: bool

    def as_dict(self) -> dict:
        return asdict(self)


def can_modify_prospect(role: Any, user_id: Optional[str], prospect: Any) -> bool:
    context = OwnershipContext.for_resource(prospect, user_id)
    return can_perform(role, Action.UPDATE, Resource.PROSPECTS, context)


def can_delete_prospect(role: Any, user_id: Optional[str], prospect: Any) -> bool:
    """Owners may delete; assignees may edit but never delete (admins excepted)."""
    context = OwnershipContext.for_resource(prospect, user_id)
    return can_perform(role, Action.DELETE, Resource.PROSPECTS, context)


def filter_prospects(prospects: Iterable[T], role: Any, user_id: Optional[str]) -> list[T]:
    """
    Keep the prospects the role may see, in input order.

    Super admins, admins and managers see the whole list; workspace scoping
    is the data layer's job (see queries.visible_prospects_statement). Agents
    keep what they created or are assigned. No role keeps nothing.
    """
    resolved = coerce_role(role)
    if resolved is None:
        return []

    if resolved in (Role.SUPER_ADMIN, Role.ADMIN, Role.MANAGER):
        return list(prospects)

    if resolved is Role.AGENT:
        if not user_id:
            return []
        visible = []
        seen = 0
        for prospect in prospects:
            seen += 1
            if read_field(prospect, "created_by") == user_id or read_field(prospect, "assigned_to") == user_id:
                visible.append(prospect)
        log.debug(f"Agent {user_id} sees {len(visible)} of {seen} prospects")
        return visible

    return []


def get_available_actions(role: Any, user_id: Optional[str], prospect: Any) -> AvailableActions:
    return AvailableActions(
        can_view=can_perform(role, Action.READ, Resource.PROSPECTS),
        can_edit=can_modify_prospect(role, user_id, prospect),
        can_delete=can_delete_prospect(role, user_id, prospect),
        can_assign=has_permission(role, Permission.PROSPECTS_ASSIGN),
    )


def get_assignable_users(role: Any, users: Iterable[T]) -> list[T]:
    """
    Users a prospect may be assigned to by `role`.

    Admins and super admins may assign to anyone in the workspace, managers
    only to agents. Other roles may not assign at all.
    """
    resolved = coerce_role(role)
    if resolved is None or not has_permission(resolved, Permission.PROSPECTS_ASSIGN):
        return []

    if resolved in (Role.SUPER_ADMIN, Role.ADMIN):
        return list(users)

    if resolved is Role.MANAGER:
        return [user for user in users if coerce_role(read_field(user, "role")) is Role.AGENT]

    return []
