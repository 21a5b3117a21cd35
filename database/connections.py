"""
Mailchimp connection repository

One row per panel user. Access tokens are stored encrypted and only
decrypted on the way out to the API client.
"""
import logging
from typing import Any, Dict, Optional

from database.panel_db import get_panel_connection
from utils.crypto import TokenEncryptionError, decrypt_token, encrypt_token

logger = logging.getLogger(__name__)


async def find_connection(user_id: str) -> Optional[Dict]:
    async with get_panel_connection() as db:
        return await db.fetchrow("SELECT * FROM mailchimp_connections WHERE user_id = $1", user_id)


async def get_decrypted_token(user_id: str) -> Optional[Dict[str, str]]:
    """Returns {'access_token', 'server_prefix'} or None when there is nothing usable"""
    connection = await find_connection(user_id)
    if not connection or not connection['is_active']:
        return None
    try:
        access_token = decrypt_token(connection['access_token'])
    except TokenEncryptionError as e:
        logger.error(f"Failed to decrypt Mailchimp token for user {user_id}: {e}")
        return None
    return {"access_token": access_token, "server_prefix": connection['server_prefix']}


async def save_connection(
    user_id: str,
    access_token: str,
    server_prefix: str,
    account_id: str,
    email: Optional[str] = None,
    username: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Dict:
    """Create the connection or replace the existing one (reconnect reactivates)"""
    encrypted = encrypt_token(access_token)
    async with get_panel_connection() as db:
        row = await db.fetchrow("""
            INSERT INTO mailchimp_connections
                (user_id, access_token, server_prefix, account_id, email, username, metadata,
                 is_active, last_validated_at, updated_at)
            VALUES ($1, $2, $3, $4, $5, $6, $7, TRUE, NOW(), NOW())
            ON CONFLICT (user_id) DO UPDATE SET
                access_token = EXCLUDED.access_token,
                server_prefix = EXCLUDED.server_prefix,
                account_id = EXCLUDED.account_id,
                email = EXCLUDED.email,
                username = EXCLUDED.username,
                metadata = EXCLUDED.metadata,
                is_active = TRUE,
                last_validated_at = NOW(),
                updated_at = NOW()
            RETURNING *
        """, user_id, encrypted, server_prefix, account_id, email, username, metadata or {})
    logger.info(f"Saved Mailchimp connection for user {user_id} ({server_prefix})")
    return row


async def deactivate_connection(user_id: str) -> bool:
    async with get_panel_connection() as db:
        result = await db.execute(
            "UPDATE mailchimp_connections SET is_active = FALSE, updated_at = NOW() WHERE user_id = $1", user_id
        )
    return result == "UPDATE 1"


async def delete_connection(user_id: str) -> bool:
    async with get_panel_connection() as db:
        return "DELETE 1" in await db.execute("DELETE FROM mailchimp_connections WHERE user_id = $1", user_id)


async def touch_validation(user_id: str):
    async with get_panel_connection() as db:
        await db.execute(
            "UPDATE mailchimp_connections SET last_validated_at = NOW(), updated_at = NOW() WHERE user_id = $1",
            user_id
        )
