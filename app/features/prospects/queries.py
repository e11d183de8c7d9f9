"""
Data-layer visibility for prospects.

SQL counterpart of access.filter_prospects: the store applies these clauses
first and the facade re-checks the rows it returns.
"""
from typing import Any, Optional
from sqlalchemy import ColumnElement, Select, false, or_, select, true

from app.features.permissions.engine import coerce_role
from app.features.permissions.matrix import Role
from app.features.prospects.models import Prospect


def visible_prospects_clause(role: Any, user_id: Optional[str]) -> ColumnElement[bool]:
    """Row filter for the role's prospect visibility, ignoring workspaces."""
    resolved = coerce_role(role)
    if resolved is None:
        return false()

    if resolved is Role.AGENT:
        if not user_id:
            return false()
        return or_(Prospect.created_by == user_id, Prospect.assigned_to == user_id)

    return true()


def visible_prospects_statement(
    role: Any,
    user_id: Optional[str],
    workspace_id: Optional[str],
) -> Select:
    """
    SELECT of the prospects visible to a user, newest first.

    Every role is confined to `workspace_id`; only a super admin may omit
    it to see all workspaces.
    """
    stmt = select(Prospect).where(visible_prospects_clause(role, user_id))

    if workspace_id:
        stmt = stmt.where(Prospect.workspace_id == workspace_id)
    elif coerce_role(role) is not Role.SUPER_ADMIN:
        stmt = stmt.where(false())

    return stmt.order_by(Prospect.created_at.desc(), Prospect.id.desc())
