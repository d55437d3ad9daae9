"""FastAPI dependency resolving the caller's user id.

Anonymous callers get None rather than a 401 here; the cart engine
decides which operations need a user.
"""
import os
from typing import Optional

from fastapi import Header

from core.logging import get_logger
from .session import verify_web_session_token

logger = get_logger(__name__)

LOGIN_URL = os.environ.get("LOGIN_URL", "/login.html")


async def get_current_user_id(
    authorization: str = Header(None, alias="Authorization"),
) -> Optional[str]:
    """
    Resolve `Authorization: Bearer <session_token>` to a user id.

    Returns None for missing, malformed, unknown or expired tokens.
    """
    if not authorization:
        return None

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.debug("Ignoring non-bearer authorization header")
        return None

    session = verify_web_session_token(parts[1])
    if not session:
        logger.debug("Invalid or expired session token")
        return None

    return session["user_id"]
