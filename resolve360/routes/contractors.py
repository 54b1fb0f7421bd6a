# resolve360/routes/contractors.py
from fastapi import APIRouter, Depends, HTTPException
from typing import List, Optional
from uuid import UUID
import asyncpg
import logging

from ..database import get_db
from ..models.issue import IssueOut, IssueStatusUpdate
from ..queries import issue_queries
from ..services import issue_lifecycle
from ..services.lifecycle import IssueStatus
from ..services.roles import Role
from ..utils.auth import require_role

contractors_router = APIRouter(prefix="/contractor", tags=["Contractor"])
logger = logging.getLogger(__name__)

@contractors_router.get("/issues", response_model=List[IssueOut])
async def get_assigned_issues(
    status: Optional[IssueStatus] = None,
    current_user: dict = Depends(require_role(Role.CONTRACTOR.value)),
    conn: asyncpg.Connection = Depends(get_db)
):
    rows = await issue_queries.get_contractor_issues(
        conn,
        current_user["email"],
        status.value if status else None
    )
    return [dict(row) for row in rows]

async def change_issue_status(
    issue_id: UUID,
    new_status: IssueStatus,
    current_user: dict,
    conn: asyncpg.Connection
) -> dict:
    issue = await issue_queries.get_issue_by_id(conn, issue_id)
    if not issue:
        raise HTTPException(status_code=404, detail="Issue not found")

    updates = issue_lifecycle.transition(current_user, dict(issue), new_status)
    updated = await issue_queries.update_issue(conn, issue_id, updates)

    logger.info(f"{current_user['email']} set issue {issue_id} to {updates['status']}")
    return dict(updated)

@contractors_router.put("/issues/{issue_id}/status", response_model=IssueOut)
async def update_assigned_issue_status(
    issue_id: UUID,
    status_update: IssueStatusUpdate,
    current_user: dict = Depends(require_role(Role.CONTRACTOR.value)),
    conn: asyncpg.Connection = Depends(get_db)
):
    return await change_issue_status(issue_id, status_update.status, current_user, conn)
