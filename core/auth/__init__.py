"""Authentication package."""
from .session import create_web_session, verify_web_session_token, revoke_web_session
from .dependencies import LOGIN_URL, get_current_user_id

__all__ = [
    "LOGIN_URL",
    "create_web_session",
    "verify_web_session_token",
    "revoke_web_session",
    "get_current_user_id",
]
