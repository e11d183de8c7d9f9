"""
Prospect model: the CRM's sales lead record.

Only the ownership columns (`created_by`, `assigned_to`) and the workspace
matter to authorization; the rest is the lead's business data.
"""
import enum
from sqlalchemy import String, Text, Enum as SQLEnum, Index
from sqlalchemy.orm import Mapped, mapped_column
from ulid import ULID

from app.core.database.base import Base, TimestampMixin


def generate_ulid() -> str:
    """Generate a new ULID string."""
    return str(ULID())


class ProspectStatus(str, enum.Enum):
    """Pipeline stage of a prospect."""
    NEW = "new"
    CONTACTED = "contacted"
    FOLLOW_UP = "follow_up"
    MEETING = "meeting"
    WON = "won"
    LOST = "lost"


class Prospect(Base, TimestampMixin):
    """
    Sales lead owned by a workspace.

    `created_by` is set once at creation; `assigned_to` may change and may be null.
    Both hold session user IDs.
    """
    __tablename__ = "prospects"

    id: Mapped[str] = mapped_column(String(26), primary_key=True, default=generate_ulid)
    workspace_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    company: Mapped[str] = mapped_column(String(255), nullable=False)
    contact: Mapped[str | None] = mapped_column(String(255), nullable=True)
    position: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    status: Mapped[ProspectStatus] = mapped_column(
        SQLEnum(ProspectStatus),
        default=ProspectStatus.NEW,
        nullable=False,
        index=True
    )
    next_action: Mapped[str | None] = mapped_column(String(500), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Ownership
    created_by: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    assigned_to: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)

    __table_args__ = (
        Index("ix_prospects_workspace_assignee", "workspace_id", "assigned_to"),
    )

    def __repr__(self) -> str:
        return f"<Prospect(id={self.id}, company={self.company!r}, workspace_id={self.workspace_id})>"
