# resolve360/queries/issue_queries.py
from typing import Optional, Dict, Any, List
from uuid import UUID
import asyncpg

from ..utils.errors import StoreError, StoreErrorKind
from .store_errors import translate_store_errors

ISSUE_COLUMNS = """
    issue_id, user_id, user_email, user_name, image_url, upload_success,
    description, category, priority, assigned_contractor, confidence,
    status, created_at, updated_at
"""

# Columns a partial update may touch; created_at and user_id never change.
UPDATABLE_COLUMNS = {
    "status",
    "category",
    "priority",
    "assigned_contractor",
    "confidence",
    "description",
    "image_url",
    "upload_success",
}

@translate_store_errors("submit issue")
async def create_issue(
    conn: asyncpg.Connection,
    user_id: str,
    user_email: Optional[str],
    user_name: Optional[str],
    image_url: str,
    description: Optional[str],
    category: str,
    priority: str,
    assigned_contractor: str,
    confidence: float,
    upload_success: bool = False,
    **ignored: Any
) -> Dict[str, Any]:
    """Create a new issue; status always starts as Open"""
    for field, value in (("userId", user_id), ("category", category), ("imageUrl", image_url)):
        if not value:
            raise StoreError(StoreErrorKind.VALIDATION, f"{field} is required", operation="submit issue")

    return await conn.fetchrow(
        f"""
        INSERT INTO issue (
            user_id, user_email, user_name, image_url, upload_success,
            description, category, priority, assigned_contractor,
            confidence, status, created_at, updated_at
        )
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, 'Open', NOW(), NOW())
        RETURNING {ISSUE_COLUMNS}
        """,
        user_id, user_email, user_name, image_url, upload_success,
        description, category, priority, assigned_contractor, confidence
    )

@translate_store_errors("update issue")
async def update_issue(
    conn: asyncpg.Connection,
    issue_id: UUID,
    updates: Dict[str, Any]
) -> Dict[str, Any]:
    """Merge the given fields into an issue and refresh updated_at"""
    set_clauses = []
    params = []
    idx = 1

    for field, value in updates.items():
        if field not in UPDATABLE_COLUMNS:
            raise StoreError(StoreErrorKind.VALIDATION, f"{field} cannot be updated", operation="update issue")
        set_clauses.append(f"{field} = ${idx}")
        params.append(value)
        idx += 1

    set_clauses.append("updated_at = NOW()")
    query = f"""
        UPDATE issue
        SET {', '.join(set_clauses)}
        WHERE issue_id = ${idx}
        RETURNING {ISSUE_COLUMNS}
    """
    params.append(issue_id)

    issue = await conn.fetchrow(query, *params)
    if issue is None:
        raise StoreError(StoreErrorKind.NOT_FOUND, f"issue {issue_id} does not exist", operation="update issue")
    return issue

@translate_store_errors("get issue")
async def get_issue_by_id(
    conn: asyncpg.Connection,
    issue_id: UUID
) -> Optional[Dict[str, Any]]:
    return await conn.fetchrow(
        f"SELECT {ISSUE_COLUMNS} FROM issue WHERE issue_id = $1",
        issue_id
    )

@translate_store_errors("load issues")
async def get_user_issues(
    conn: asyncpg.Connection,
    user_id: str
) -> List[Dict[str, Any]]:
    """Issues reported by one resident, newest first"""
    return await conn.fetch(
        f"""
        SELECT {ISSUE_COLUMNS} FROM issue
        WHERE user_id = $1
        ORDER BY created_at DESC
        """,
        user_id
    )

@translate_store_errors("load all issues")
async def get_all_issues(conn: asyncpg.Connection) -> List[Dict[str, Any]]:
    return await conn.fetch(
        f"SELECT {ISSUE_COLUMNS} FROM issue ORDER BY created_at DESC"
    )

@translate_store_errors("load issues by status")
async def get_issues_by_status(
    conn: asyncpg.Connection,
    status: str
) -> List[Dict[str, Any]]:
    return await conn.fetch(
        f"""
        SELECT {ISSUE_COLUMNS} FROM issue
        WHERE status = $1
        ORDER BY created_at DESC
        """,
        status
    )

@translate_store_errors("load contractor issues")
async def get_contractor_issues(
    conn: asyncpg.Connection,
    contractor_email: str,
    status: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Issues assigned to a contractor with optional status filter"""
    query = f"""
        SELECT {ISSUE_COLUMNS} FROM issue
        WHERE LOWER(assigned_contractor) = LOWER($1)
    """
    params = [contractor_email]

    if status:
        query += " AND status = $2"
        params.append(status)

    query += " ORDER BY created_at DESC"

    return await conn.fetch(query, *params)

@translate_store_errors("load issue statistics")
async def get_issue_statistics(conn: asyncpg.Connection) -> Dict[str, Any]:
    """Counts by status, category and priority across all issues"""
    rows = await conn.fetch(
        """
        SELECT status, category, priority, COUNT(*) AS count
        FROM issue
        GROUP BY status, category, priority
        """
    )

    stats = {
        "total": 0,
        "open": 0,
        "assigned": 0,
        "resolved": 0,
        "by_category": {},
        "by_priority": {"critical": 0, "high": 0, "medium": 0, "low": 0},
    }
    for row in rows:
        count = row["count"]
        stats["total"] += count
        status_key = (row["status"] or "").lower()
        if status_key in ("open", "assigned", "resolved"):
            stats[status_key] += count
        if row["category"]:
            stats["by_category"][row["category"]] = stats["by_category"].get(row["category"], 0) + count
        if row["priority"]:
            stats["by_priority"][row["priority"]] = stats["by_priority"].get(row["priority"], 0) + count
    return stats
