"""
API dependency injection module.

Re-exports the session and identity dependencies and adds the
moderator gate used by the admin router.
"""

from fastapi import Depends

from board.db.async_session import get_async_db
from board.models.user import User
from board.services.async_auth import get_current_user
from board.services.permissions import require_moderator

__all__ = ["get_async_db", "get_current_user", "get_current_moderator"]


async def get_current_moderator(current_user: User = Depends(get_current_user)) -> User:
    """Resolve the acting user and reject anyone who is not a moderator."""
    require_moderator(current_user, "access the admin area")
    return current_user
