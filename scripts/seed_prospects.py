"""
Seed script to populate a demo workspace with prospects.

Creates a few prospects owned by or assigned to three demo users (one
manager, two agents) and prints a development bearer token for each demo
user, signed with JWT_SECRET.

Usage:
    python -m scripts.seed_prospects
"""
import asyncio
from datetime import datetime, timedelta, timezone

import jwt
from sqlalchemy import select

from app.core import config
from app.core.database.engine import AsyncSessionLocal, init_db
from app.features.permissions.matrix import Role
from app.features.prospects.models import Prospect, ProspectStatus
from app.utils import get_logger


log = get_logger(__name__)

DEMO_WORKSPACE = "demo-workspace"

DEMO_USERS = {
    "admin-1": Role.ADMIN,
    "manager-1": Role.MANAGER,
    "agent-1": Role.AGENT,
    "agent-2": Role.AGENT,
}

DEMO_PROSPECTS = [
    # company, contact, status, created_by, assigned_to
    ("Globex Corp", "Jean Dupont", ProspectStatus.CONTACTED, "manager-1", "agent-1"),
    ("Initech", "Marie Koffi", ProspectStatus.NEW, "agent-1", None),
    ("Umbrella Corporation", "Pierre Mensah", ProspectStatus.MEETING, "agent-2", "agent-2"),
    ("Soylent", "Awa Diallo", ProspectStatus.FOLLOW_UP, "admin-1", "agent-2"),
]


def issue_dev_token(user_id: str, role: Role, hours: int = 12) -> str:
    """Sign a short-lived development token for a demo user."""
    claims = {
        "sub": user_id,
        "role": role.value,
        "workspace_id": DEMO_WORKSPACE,
        "exp": datetime.now(timezone.utc) + timedelta(hours=hours),
    }
    return jwt.encode(claims, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


async def seed_prospects() -> int:
    """Insert demo prospects that do not exist yet. Returns the number created."""
    created = 0
    async with AsyncSessionLocal() as db:
        for company, contact, status, created_by, assigned_to in DEMO_PROSPECTS:
            existing = await db.scalar(
                select(Prospect).where(
                    Prospect.workspace_id == DEMO_WORKSPACE,
                    Prospect.company == company,
                )
            )
            if existing:
                log.debug(f"Prospect '{company}' already exists, skipping")
                continue

            db.add(Prospect(
                workspace_id=DEMO_WORKSPACE,
                company=company,
                contact=contact,
                status=status,
                created_by=created_by,
                assigned_to=assigned_to,
            ))
            created += 1
        await db.commit()
    return created


async def main():
    log.info("Initializing database...")
    await init_db()
    created = await seed_prospects()
    log.info(f"Created {created} demo prospects in {DEMO_WORKSPACE}")

    for user_id, role in DEMO_USERS.items():
        print(f"{user_id} ({role.value}): {issue_dev_token(user_id, role)}")


if __name__ == "__main__":
    asyncio.run(main())
