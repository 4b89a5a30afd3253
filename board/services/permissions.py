"""Identity and role checks used by every mutating operation."""

from board.core.exceptions import ForbiddenError
from board.models.user import User


def is_moderator(user: User) -> bool:
    return user is not None and user.is_moderator


def require_moderator(user: User, action: str) -> None:
    """Raise ForbiddenError unless ``user`` is a moderator."""
    if not is_moderator(user):
        raise ForbiddenError(f"Moderator role required to {action}")


def require_author_or_moderator(entity, user: User, action: str) -> None:
    """Raise ForbiddenError unless ``user`` wrote ``entity`` or is a moderator."""
    if not entity.can_modify(user):
        raise ForbiddenError(f"Not allowed to {action}")
