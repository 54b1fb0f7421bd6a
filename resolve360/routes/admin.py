# resolve360/routes/admin.py
from fastapi import APIRouter, Depends, HTTPException
from typing import List, Optional
from uuid import UUID
import asyncpg
import logging

from ..database import get_db
from ..models.auth import UserActiveUpdate, UserOut
from ..models.issue import ClassificationCorrection, IssueOut, IssueStatistics, IssueStatusUpdate
from ..queries import issue_queries, user_queries
from ..services import contractor_assigner, issue_classifier
from ..services.lifecycle import IssueStatus
from ..services.reporting import correct_classification
from ..services.roles import Role
from ..utils.auth import require_role
from .contractors import change_issue_status

admin_router = APIRouter(prefix="/admin", tags=["Admin"])
logger = logging.getLogger(__name__)

admin_only = require_role(Role.ADMIN.value)

@admin_router.get("/issues", response_model=List[IssueOut])
async def get_issues(
    status: Optional[IssueStatus] = None,
    current_user: dict = Depends(admin_only),
    conn: asyncpg.Connection = Depends(get_db)
):
    if status:
        rows = await issue_queries.get_issues_by_status(conn, status.value)
    else:
        rows = await issue_queries.get_all_issues(conn)
    return [dict(row) for row in rows]

@admin_router.put("/issues/{issue_id}/status", response_model=IssueOut)
async def update_issue_status(
    issue_id: UUID,
    status_update: IssueStatusUpdate,
    current_user: dict = Depends(admin_only),
    conn: asyncpg.Connection = Depends(get_db)
):
    return await change_issue_status(issue_id, status_update.status, current_user, conn)

@admin_router.put("/issues/{issue_id}/classification", response_model=IssueOut)
async def update_issue_classification(
    issue_id: UUID,
    correction: ClassificationCorrection,
    current_user: dict = Depends(admin_only),
    conn: asyncpg.Connection = Depends(get_db)
):
    if issue_classifier.category_details(correction.category) is None:
        raise HTTPException(status_code=400, detail=f"Unknown category: {correction.category}")

    issue = await correct_classification(
        conn,
        issue_id,
        correction.category,
        classifier=issue_classifier,
        assigner=contractor_assigner,
        contractor=correction.assigned_contractor,
    )

    logger.info(f"{current_user['email']} re-filed issue {issue_id} under {correction.category}")
    return issue

@admin_router.get("/statistics", response_model=IssueStatistics)
async def get_statistics(
    current_user: dict = Depends(admin_only),
    conn: asyncpg.Connection = Depends(get_db)
):
    return await issue_queries.get_issue_statistics(conn)

@admin_router.get("/users", response_model=List[UserOut])
async def get_users(
    role: Optional[Role] = None,
    current_user: dict = Depends(admin_only),
    conn: asyncpg.Connection = Depends(get_db)
):
    if role:
        rows = await user_queries.get_users_by_role(conn, role.value)
    else:
        rows = await user_queries.get_all_users(conn)
    return [dict(row) for row in rows]

@admin_router.put("/users/{user_id}/active", response_model=UserOut)
async def set_user_active(
    user_id: str,
    update: UserActiveUpdate,
    current_user: dict = Depends(admin_only),
    conn: asyncpg.Connection = Depends(get_db)
):
    if user_id == current_user["user_id"] and not update.is_active:
        raise HTTPException(status_code=400, detail="Admins cannot deactivate themselves")

    user = await user_queries.set_user_active(conn, user_id, update.is_active)
    return dict(user)
