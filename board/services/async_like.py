from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from board.core.exceptions import DuplicateLikeError, ValidationError
from board.models.comment import Comment
from board.models.comment_like import CommentLike
from board.models.user import User
from board.services.async_error_handler import retry_once_on_integrity_error
from board.services.base import AsyncQueryUtils
from board.utils.logger import reaction_logger

LIKED = "liked"
UNLIKED = "unliked"


class AsyncCommentLikeService:
    """Toggle-style likes on comments. ``Comment.like_count`` never drops below zero."""

    @staticmethod
    async def _find_like(db: AsyncSession, comment_id: int, user_id: int) -> Optional[CommentLike]:
        result = await db.execute(
            select(CommentLike).where(CommentLike.comment_id == comment_id, CommentLike.user_id == user_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def _lock_live_comment(db: AsyncSession, comment_id: int, user_id: int) -> Comment:
        comment = await AsyncQueryUtils.get_or_raise(db, Comment, comment_id, for_update=True, label="Comment")
        if comment.deleted:
            raise ValidationError(f"Cannot like a deleted comment: {comment_id}")
        await AsyncQueryUtils.get_or_raise(db, User, user_id, label="User")
        return comment

    @staticmethod
    async def toggle_like(db: AsyncSession, comment_id: int, user_id: int) -> str:
        """
        Like the comment, or unlike it if the user already does.

        Returns:
            ``"liked"`` or ``"unliked"``

        Raises:
            NotFoundError: Comment or user does not exist
            ValidationError: Comment is soft-deleted
            DuplicateLikeError: The retry after a unique-constraint race collided again
        """

        async def toggle() -> str:
            comment = await AsyncCommentLikeService._lock_live_comment(db, comment_id, user_id)
            existing = await AsyncCommentLikeService._find_like(db, comment_id, user_id)

            if existing is not None:
                await db.delete(existing)
                comment.like_count = max(0, comment.like_count - 1)
                result = UNLIKED
            else:
                db.add(CommentLike(comment_id=comment_id, user_id=user_id))
                comment.like_count += 1
                result = LIKED

            await db.commit()
            reaction_logger.info("Comment like toggled", "LIKE", comment_id=comment_id,
                                 user_id=user_id, result=result, like_count=comment.like_count)
            return result

        async def ensure_liked() -> str:
            # A concurrent request from the same user already inserted the like
            comment = await AsyncCommentLikeService._lock_live_comment(db, comment_id, user_id)
            if await AsyncCommentLikeService._find_like(db, comment_id, user_id) is None:
                db.add(CommentLike(comment_id=comment_id, user_id=user_id))
                comment.like_count += 1
            await db.commit()
            return LIKED

        return await retry_once_on_integrity_error(
            db, toggle, race_error=DuplicateLikeError, operation_name="toggle_like", retry=ensure_liked
        )

    @staticmethod
    async def like_count(db: AsyncSession, comment_id: int) -> int:
        comment = await AsyncQueryUtils.get_or_raise(db, Comment, comment_id, label="Comment")
        return comment.like_count

    @staticmethod
    async def is_liked_by(db: AsyncSession, comment_id: int, user_id: int) -> bool:
        return await AsyncCommentLikeService._find_like(db, comment_id, user_id) is not None
