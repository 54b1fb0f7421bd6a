# resolve360/queries/user_queries.py
from typing import Optional, Dict, Any, List
import asyncpg

from ..utils.errors import StoreError, StoreErrorKind
from .store_errors import translate_store_errors

USER_COLUMNS = "user_id, email, display_name, photo_url, role, is_active, created_at, updated_at"

@translate_store_errors("get user")
async def get_user_by_id(
    conn: asyncpg.Connection,
    user_id: str
) -> Optional[Dict[str, Any]]:
    return await conn.fetchrow(
        f"SELECT {USER_COLUMNS} FROM app_user WHERE user_id = $1",
        user_id
    )

@translate_store_errors("create user")
async def create_user(
    conn: asyncpg.Connection,
    user_id: str,
    email: str,
    display_name: Optional[str],
    photo_url: Optional[str],
    role: str
) -> Dict[str, Any]:
    """Create a user profile on first sign-in"""
    return await conn.fetchrow(
        f"""
        INSERT INTO app_user (user_id, email, display_name, photo_url, role, is_active, created_at)
        VALUES ($1, $2, $3, $4, $5, true, NOW())
        RETURNING {USER_COLUMNS}
        """,
        user_id, email, display_name, photo_url, role
    )

@translate_store_errors("update user role")
async def update_user_role(
    conn: asyncpg.Connection,
    user_id: str,
    role: str
) -> Optional[Dict[str, Any]]:
    return await conn.fetchrow(
        f"""
        UPDATE app_user
        SET role = $1, updated_at = NOW()
        WHERE user_id = $2
        RETURNING {USER_COLUMNS}
        """,
        role, user_id
    )

@translate_store_errors("update user")
async def set_user_active(
    conn: asyncpg.Connection,
    user_id: str,
    is_active: bool
) -> Dict[str, Any]:
    user = await conn.fetchrow(
        f"""
        UPDATE app_user
        SET is_active = $1, updated_at = NOW()
        WHERE user_id = $2
        RETURNING {USER_COLUMNS}
        """,
        is_active, user_id
    )
    if user is None:
        raise StoreError(StoreErrorKind.NOT_FOUND, f"user {user_id} does not exist", operation="update user")
    return user

@translate_store_errors("load users")
async def get_all_users(conn: asyncpg.Connection) -> List[Dict[str, Any]]:
    return await conn.fetch(
        f"SELECT {USER_COLUMNS} FROM app_user ORDER BY created_at DESC"
    )

@translate_store_errors("load users by role")
async def get_users_by_role(
    conn: asyncpg.Connection,
    role: str
) -> List[Dict[str, Any]]:
    return await conn.fetch(
        f"""
        SELECT {USER_COLUMNS} FROM app_user
        WHERE role = $1
        ORDER BY created_at DESC
        """,
        role
    )
