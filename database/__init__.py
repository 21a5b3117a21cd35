"""
Database module - exports for the admin panel
"""
# Panel Database Core
from database.panel_db import (
    init_panel_db, close_panel_db, get_panel_connection,
    # Panel Users
    get_panel_user, update_panel_user_login, ensure_initial_superadmin,
    # Utilities
    check_db_health,
)

# Mailchimp connections
from database.connections import (
    find_connection, get_decrypted_token, save_connection,
    deactivate_connection, delete_connection, touch_validation,
)

__all__ = [
    'init_panel_db', 'close_panel_db', 'get_panel_connection',
    'get_panel_user', 'update_panel_user_login', 'ensure_initial_superadmin',
    'check_db_health',
    'find_connection', 'get_decrypted_token', 'save_connection',
    'deactivate_connection', 'delete_connection', 'touch_validation',
]
