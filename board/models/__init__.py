"""Database models."""

# Import all models here to ensure they're recognized by SQLAlchemy
from board.models.comment import Comment
from board.models.comment_like import CommentLike
from board.models.enums import ReportStatus, ReportTargetType, Role
from board.models.post import Post
from board.models.post_vote import PostVote
from board.models.report import CommentReport, PostReport
from board.models.user import User

__all__ = [
    "User",
    "Post",
    "Comment",
    "PostVote",
    "CommentLike",
    "PostReport",
    "CommentReport",
    "Role",
    "ReportStatus",
    "ReportTargetType",
]
