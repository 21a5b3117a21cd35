"""
Panel Database Layer - the dashboard's own storage
Contains: panel_users, mailchimp_connections
Mailchimp data itself is never stored, only the OAuth connection
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional, Any, List, Dict
import asyncpg

import config

logger = logging.getLogger(__name__)

_panel_pool = None


class DBWrapper:
    """Consistent interface for asyncpg: rows come back as dicts"""
    def __init__(self, conn):
        self.conn = conn

    async def execute(self, query: str, *args):
        return await self.conn.execute(query, *args)

    async def fetch(self, query: str, *args) -> List[Dict]:
        return [dict(r) for r in await self.conn.fetch(query, *args)]

    async def fetchrow(self, query: str, *args) -> Optional[Dict]:
        row = await self.conn.fetchrow(query, *args)
        return dict(row) if row else None

    async def fetchval(self, query: str, *args) -> Any:
        return await self.conn.fetchval(query, *args)


async def _init_connection(conn):
    """JSONB columns round-trip as Python objects"""
    import json
    await conn.set_type_codec("jsonb", encoder=json.dumps, decoder=json.loads, schema="pg_catalog")


async def init_panel_db(database_url: str):
    """Initialize panel database with connection pool"""
    global _panel_pool

    logger.info("Connecting to Panel Database...")
    _panel_pool = await asyncpg.create_pool(
        database_url,
        min_size=config.DB_POOL_MIN,
        max_size=config.DB_POOL_MAX,
        max_inactive_connection_lifetime=300,
        command_timeout=30,
        init=_init_connection,
    )
    logger.info("Panel database pool initialized")

    await _create_panel_schema()


async def close_panel_db():
    """Close panel database pool"""
    global _panel_pool
    if _panel_pool:
        await _panel_pool.close()
        _panel_pool = None
        logger.info("Panel database pool closed")


@asynccontextmanager
async def get_panel_connection():
    """Get connection from panel database pool"""
    if not _panel_pool:
        raise RuntimeError("Panel database pool not initialized")

    conn = await asyncio.wait_for(_panel_pool.acquire(), timeout=10.0)
    try:
        yield DBWrapper(conn)
    finally:
        await _panel_pool.release(conn)


async def _create_panel_schema():
    """Create panel tables"""
    async with get_panel_connection() as db:
        # Panel Users - dashboard access control
        await db.execute("""
            CREATE TABLE IF NOT EXISTS panel_users (
                id SERIAL PRIMARY KEY,
                username TEXT UNIQUE NOT NULL,
                password_hash TEXT NOT NULL,
                role TEXT DEFAULT 'admin',
                created_at TIMESTAMP DEFAULT NOW(),
                last_login TIMESTAMP
            );
        """)

        # Mailchimp Connections - one OAuth connection per panel user
        await db.execute("""
            CREATE TABLE IF NOT EXISTS mailchimp_connections (
                id SERIAL PRIMARY KEY,
                user_id TEXT UNIQUE NOT NULL,
                access_token TEXT NOT NULL,
                server_prefix TEXT NOT NULL,
                account_id TEXT NOT NULL,
                email TEXT,
                username TEXT,
                is_active BOOLEAN DEFAULT TRUE,
                metadata JSONB DEFAULT '{}'::jsonb,
                created_at TIMESTAMPTZ DEFAULT NOW(),
                last_validated_at TIMESTAMPTZ,
                updated_at TIMESTAMPTZ DEFAULT NOW()
            );
        """)

        await db.execute("CREATE INDEX IF NOT EXISTS idx_mailchimp_connections_active ON mailchimp_connections(is_active)")

        logger.info("Panel schema initialized")


# === Panel Users Methods ===

async def get_panel_user(username: str):
    async with get_panel_connection() as db: return await db.fetchrow("SELECT * FROM panel_users WHERE username = $1", username)

async def update_panel_user_login(user_id: int):
    async with get_panel_connection() as db: await db.execute("UPDATE panel_users SET last_login = NOW() WHERE id = $1", user_id)

async def ensure_initial_superadmin(username: str, password_hash: str):
    """Create initial superadmin if no panel users exist"""
    async with get_panel_connection() as db:
        count = await db.fetchval("SELECT COUNT(*) FROM panel_users")
        if count == 0:
            await db.execute(
                "INSERT INTO panel_users (username, password_hash, role) VALUES ($1, $2, 'superadmin')",
                username, password_hash
            )
            logger.info(f"Created initial superadmin user: {username}")


# === Utility Methods ===

async def check_db_health() -> bool:
    """Check panel database connection health"""
    if not _panel_pool: return False
    try:
        async with get_panel_connection() as db:
            return await db.fetchval("SELECT 1") == 1
    except (asyncpg.PostgresError, OSError, asyncio.TimeoutError) as e:
        logger.warning(f"Panel database health check failed: {e}")
        return False
