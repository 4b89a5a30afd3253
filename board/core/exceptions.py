"""
Domain exceptions for the board core.

Every exception carries the HTTP status the API layer answers with, so the
services never import FastAPI to signal a rejected operation.
"""

from typing import Optional

from fastapi import status


class BoardError(Exception):
    """Base exception for rejected board operations."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "board_error"

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class NotFoundError(BoardError):
    """The referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "not_found"


class ValidationError(BoardError):
    """Content or shape invariant violated (empty title, reply to a reply, deleted target)."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "validation_error"


class ForbiddenError(BoardError):
    """Acting user is neither the author nor a moderator."""

    status_code = status.HTTP_403_FORBIDDEN
    error_code = "forbidden"


class AlreadyDeletedError(BoardError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "already_deleted"


class AlreadyReportedError(BoardError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "already_reported"


class DuplicateResourceError(BoardError):
    """Username or email already taken."""

    status_code = status.HTTP_409_CONFLICT
    error_code = "duplicate_resource"


class DuplicateVoteError(BoardError):
    """A concurrent request inserted the same (post, user) vote first."""

    status_code = status.HTTP_409_CONFLICT
    error_code = "duplicate_vote"


class DuplicateLikeError(BoardError):
    """A concurrent request inserted the same (comment, user) like first."""

    status_code = status.HTTP_409_CONFLICT
    error_code = "duplicate_like"
