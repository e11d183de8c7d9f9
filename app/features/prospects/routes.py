"""
Prospect visibility API routes.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.features.permissions.dependencies import require_route
from app.features.prospects.access import filter_prospects, get_available_actions
from app.features.prospects.models import Prospect
from app.features.prospects.queries import visible_prospects_statement
from app.features.prospects.schemas import AvailableActionsResponse, ProspectResponse
from app.features.users.schemas import Principal

router = APIRouter()


@router.get("", response_model=list[ProspectResponse])
async def list_prospects(
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_route("/crm"))
):
    """
    List the prospects visible to the current user in their workspace.

    Rows are filtered in SQL and checked again by the facade.
    """
    stmt = visible_prospects_statement(principal.role, principal.user_id, principal.workspace_id)
    result = await db.execute(stmt.offset(skip).limit(limit))
    return filter_prospects(result.scalars().all(), principal.role, principal.user_id)


@router.get("/{prospect_id}/actions", response_model=AvailableActionsResponse)
async def get_prospect_actions(
    prospect_id: str,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(require_route("/crm"))
):
    """
    Actions the current user may take on one prospect.

    Raises:
        HTTPException: 404 if the prospect does not exist or is not visible.
    """
    stmt = visible_prospects_statement(principal.role, principal.user_id, principal.workspace_id)
    prospect = await db.scalar(stmt.where(Prospect.id == prospect_id))
    if not prospect or not filter_prospects([prospect], principal.role, principal.user_id):
        raise HTTPException(status_code=404, detail="Prospect not found")

    actions = get_available_actions(principal.role, principal.user_id, prospect)
    return AvailableActionsResponse(prospect_id=prospect.id, **actions.as_dict())
