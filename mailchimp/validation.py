"""
Mailchimp connection validation

A stored token can be revoked on Mailchimp's side at any time. Before
handing out a client we check the stored connection and, at most once per
MAILCHIMP_VALIDATION_INTERVAL_HOURS, ping the API with it.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import config
from database import connections
from mailchimp.client import MailchimpClient
from mailchimp.errors import ErrorCodes, MailchimpConnectionError, MailchimpError

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    is_valid: bool
    error: Optional[str] = None
    credentials: Optional[Dict[str, str]] = None


def _needs_ping(last_validated_at: Optional[datetime]) -> bool:
    if last_validated_at is None:
        return True
    if last_validated_at.tzinfo is None:
        last_validated_at = last_validated_at.replace(tzinfo=timezone.utc)
    age = datetime.now(timezone.utc) - last_validated_at
    return age > timedelta(hours=config.MAILCHIMP_VALIDATION_INTERVAL_HOURS)


async def validate_connection(user_id: Optional[str]) -> ValidationResult:
    if not user_id:
        return ValidationResult(False, ErrorCodes.NOT_AUTHENTICATED)

    try:
        connection = await connections.find_connection(user_id)
        if not connection:
            return ValidationResult(False, ErrorCodes.NOT_CONNECTED)
        if not connection['is_active']:
            return ValidationResult(False, ErrorCodes.CONNECTION_INACTIVE)

        credentials = await connections.get_decrypted_token(user_id)
        if not credentials:
            return ValidationResult(False, ErrorCodes.NOT_CONNECTED)

        if _needs_ping(connection.get('last_validated_at')):
            client = MailchimpClient(credentials['access_token'], credentials['server_prefix'])
            try:
                await client.get("/ping")
            except MailchimpError as e:
                logger.warning(f"⚠️ Mailchimp token for user {user_id} failed validation: {e}")
                await connections.deactivate_connection(user_id)
                return ValidationResult(False, ErrorCodes.TOKEN_INVALID)
            await connections.touch_validation(user_id)

        return ValidationResult(True, credentials=credentials)
    except Exception as e:
        logger.error(f"Connection validation error for user {user_id}: {e}")
        return ValidationResult(False, ErrorCodes.VALIDATION_FAILED)


async def get_user_client(user_id: Optional[str]) -> MailchimpClient:
    """Client for the user's connection; raises MailchimpConnectionError otherwise"""
    result = await validate_connection(user_id)
    if not result.is_valid:
        raise MailchimpConnectionError(result.error)
    return MailchimpClient(result.credentials['access_token'], result.credentials['server_prefix'])
