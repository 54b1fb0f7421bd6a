# resolve360/routes/issues.py
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from typing import List, Optional
from uuid import UUID
import asyncpg
import logging

from ..config import settings
from ..database import db_connection, get_db
from ..models.issue import IssueOut
from ..queries import issue_queries
from ..services import contractor_assigner, image_storage, issue_classifier, issue_lifecycle
from ..services.reporting import report_issue
from ..services.roles import Role
from ..utils.auth import get_current_user, require_role
from ..utils.errors import StoreError
from ..utils.retry import retry_transient

issues_router = APIRouter(prefix="/issues", tags=["Issues"])
logger = logging.getLogger(__name__)

@issues_router.post("/", response_model=IssueOut, status_code=status.HTTP_201_CREATED)
async def create_issue(
    image: UploadFile = File(...),
    description: Optional[str] = Form(""),
    current_user: dict = Depends(require_role(Role.USER.value)),
    conn: asyncpg.Connection = Depends(get_db)
):
    data = await image.read()
    if not data:
        raise HTTPException(status_code=400, detail="Please select an image")

    issue = await report_issue(
        conn,
        reporter=current_user,
        image_data=data,
        content_type=image.content_type,
        description=description,
        classifier=issue_classifier,
        assigner=contractor_assigner,
        storage=image_storage,
        filename=image.filename,
    )
    return issue

@issues_router.get("/mine", response_model=List[IssueOut])
async def get_my_issues(current_user: dict = Depends(get_current_user)):
    async def load_issues():
        # A dropped connection cannot recover, so every attempt opens its own
        async with db_connection() as conn:
            return await issue_queries.get_user_issues(conn, current_user["user_id"])

    try:
        rows = await retry_transient(
            load_issues,
            retries=settings.retry_limit,
            base_delay=settings.retry_base_delay,
        )
    except StoreError as e:
        if not e.is_transient:
            raise
        # Retries exhausted and already logged as a warning
        return []
    return [dict(row) for row in rows]

@issues_router.get("/{issue_id}", response_model=IssueOut)
async def get_issue(
    issue_id: UUID,
    current_user: dict = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    issue = await issue_queries.get_issue_by_id(conn, issue_id)
    if not issue:
        raise HTTPException(status_code=404, detail="Issue not found")
    issue = dict(issue)

    is_owner = issue["user_id"] == current_user["user_id"]
    if not is_owner and not issue_lifecycle.can_transition(current_user, issue):
        raise HTTPException(status_code=403, detail="Not your issue")

    return issue
