# resolve360/database.py
import asyncpg
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator
from .config import settings
from .queries.store_errors import translate_store_errors

@translate_store_errors("connect to database")
async def connect() -> asyncpg.Connection:
    return await asyncpg.connect(
        user=settings.database_username,
        password=settings.database_password,
        database=settings.database_name,
        host=settings.database_hostname,
        port=settings.database_port
    )

@asynccontextmanager
async def db_connection() -> AsyncIterator[asyncpg.Connection]:
    """A connection of its own, for work retried outside the request's connection."""
    conn = await connect()
    try:
        yield conn
    finally:
        await conn.close()

async def get_db() -> AsyncGenerator[asyncpg.Connection, None]:
    async with db_connection() as conn:
        yield conn
