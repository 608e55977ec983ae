"""
Owner and session storage helpers, split by responsibility.
"""
from core.db.users.user_store import (
    upsert_user,
    get_user_by_username,
    get_user_by_id,
    update_user_email,
)
from core.db.users.sessions import (
    create_session,
    delete_session,
    get_session,
    touch_session,
    SESSION_TIMEOUT_MINUTES,
)

__all__ = [
    "upsert_user",
    "get_user_by_username",
    "get_user_by_id",
    "update_user_email",
    "create_session",
    "delete_session",
    "get_session",
    "touch_session",
    "SESSION_TIMEOUT_MINUTES",
]
