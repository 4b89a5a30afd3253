from typing import List, Tuple

from sqlalchemy import asc, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from board.core.config import settings
from board.core.exceptions import AlreadyDeletedError, ValidationError
from board.db.base_class import utc_now
from board.models.comment import Comment
from board.models.post import Post
from board.models.user import User
from board.services.base import AsyncQueryUtils
from board.services.permissions import require_author_or_moderator
from board.utils.logger import comment_logger


class AsyncCommentService:
    """
    Comment lifecycle with one level of nesting.

    Depth is enforced at creation: a reply's parent must itself be top-level,
    so ``parent.parent`` is always null.
    """

    @staticmethod
    def validate_content(content: str) -> None:
        if content is None or not content.strip():
            raise ValidationError("Comment content is required")
        if len(content) > settings.COMMENT_CONTENT_MAX_LENGTH:
            raise ValidationError(
                f"Comment content cannot exceed {settings.COMMENT_CONTENT_MAX_LENGTH} characters"
            )

    @staticmethod
    async def create_comment(db: AsyncSession, post_id: int, content: str, author: User) -> Comment:
        """Create a top-level comment on a live post."""
        post = await AsyncQueryUtils.get_or_raise(db, Post, post_id, label="Post")
        if post.deleted:
            raise ValidationError("Cannot comment on a deleted post")
        AsyncCommentService.validate_content(content)

        now = utc_now()
        comment = Comment(
            content=content,
            post_id=post.id,
            author=author,
            parent_id=None,
            like_count=0,
            deleted=False,
            created_at=now,
            updated_at=now,
        )
        db.add(comment)
        await db.commit()

        comment_logger.success("Comment created", "CREATE", comment_id=comment.id, post_id=post.id)
        return comment

    @staticmethod
    async def create_reply(db: AsyncSession, parent_comment_id: int, content: str, author: User) -> Comment:
        """Reply to a top-level comment. The reply belongs to the parent's post."""
        parent = await AsyncQueryUtils.get_or_raise(db, Comment, parent_comment_id, label="Parent comment")
        if parent.deleted:
            raise ValidationError("Cannot reply to a deleted comment")
        if parent.is_reply:
            raise ValidationError("cannot reply to a reply")
        AsyncCommentService.validate_content(content)

        now = utc_now()
        reply = Comment(
            content=content,
            post_id=parent.post_id,
            author=author,
            parent_id=parent.id,
            like_count=0,
            deleted=False,
            created_at=now,
            updated_at=now,
        )
        db.add(reply)
        await db.commit()

        comment_logger.success("Reply created", "REPLY", comment_id=reply.id, parent_id=parent.id)
        return reply

    @staticmethod
    async def get_comment(db: AsyncSession, comment_id: int, *, include_deleted: bool = False) -> Comment:
        comment = await AsyncQueryUtils.get_or_raise(db, Comment, comment_id, label="Comment")
        if comment.deleted and not include_deleted:
            raise ValidationError(f"Comment is deleted: {comment_id}")
        return comment

    @staticmethod
    async def update_comment(db: AsyncSession, comment_id: int, content: str, requesting_user: User) -> Comment:
        """Replace the content. Author or moderator only."""
        comment = await AsyncQueryUtils.get_or_raise(db, Comment, comment_id, for_update=True, label="Comment")
        if comment.deleted:
            raise ValidationError(f"Comment is deleted: {comment_id}")
        require_author_or_moderator(comment, requesting_user, "edit this comment")
        AsyncCommentService.validate_content(content)

        comment.content = content
        comment.updated_at = utc_now()
        await db.commit()

        comment_logger.info("Comment updated", "UPDATE", comment_id=comment.id, user_id=requesting_user.id)
        return comment

    @staticmethod
    async def soft_delete_comment(db: AsyncSession, comment_id: int, requesting_user: User) -> Comment:
        """Mark a comment deleted. Its replies are not touched."""
        comment = await AsyncQueryUtils.get_or_raise(db, Comment, comment_id, for_update=True, label="Comment")
        if comment.deleted:
            raise AlreadyDeletedError(f"Comment is already deleted: {comment_id}")
        require_author_or_moderator(comment, requesting_user, "delete this comment")

        comment.soft_delete()
        await db.commit()

        comment_logger.info("Comment soft-deleted", "DELETE", comment_id=comment.id, user_id=requesting_user.id)
        return comment

    @staticmethod
    async def restore_comment(db: AsyncSession, comment_id: int, requesting_user: User) -> Comment:
        comment = await AsyncQueryUtils.get_or_raise(db, Comment, comment_id, for_update=True, label="Comment")
        if not comment.deleted:
            raise ValidationError(f"Comment is not deleted: {comment_id}")
        require_author_or_moderator(comment, requesting_user, "restore this comment")

        comment.restore()
        await db.commit()

        comment_logger.info("Comment restored", "RESTORE", comment_id=comment.id, user_id=requesting_user.id)
        return comment

    @staticmethod
    async def comments_by_post(
        db: AsyncSession,
        post_id: int,
        limit: int = 50,
        offset: int = 0
    ) -> Tuple[List[Comment], int]:
        """Live top-level comments of a post, oldest first."""
        await AsyncQueryUtils.get_or_raise(db, Post, post_id, label="Post")
        conditions = [Comment.post_id == post_id, Comment.parent_id.is_(None), Comment.deleted.is_(False)]
        total_count = await AsyncQueryUtils.count(db, Comment, *conditions)

        result = await db.execute(
            select(Comment)
            .where(*conditions)
            .order_by(asc(Comment.created_at), asc(Comment.id))
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total_count

    @staticmethod
    async def all_comments_by_post(
        db: AsyncSession,
        post_id: int,
        limit: int = 100,
        offset: int = 0
    ) -> Tuple[List[Comment], int]:
        """Live comments and replies of a post, oldest first."""
        await AsyncQueryUtils.get_or_raise(db, Post, post_id, label="Post")
        conditions = [Comment.post_id == post_id, Comment.deleted.is_(False)]
        total_count = await AsyncQueryUtils.count(db, Comment, *conditions)

        result = await db.execute(
            select(Comment)
            .where(*conditions)
            .order_by(asc(Comment.created_at), asc(Comment.id))
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total_count

    @staticmethod
    async def replies_by_parent(db: AsyncSession, parent_comment_id: int) -> List[Comment]:
        """Live replies of a comment in creation order."""
        await AsyncQueryUtils.get_or_raise(db, Comment, parent_comment_id, label="Comment")
        result = await db.execute(
            select(Comment)
            .where(Comment.parent_id == parent_comment_id, Comment.deleted.is_(False))
            .order_by(asc(Comment.created_at), asc(Comment.id))
        )
        return list(result.scalars().all())

    @staticmethod
    async def comments_by_author(
        db: AsyncSession,
        author_id: int,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Comment], int]:
        """Live comments written by one user, newest first."""
        conditions = [Comment.author_id == author_id, Comment.deleted.is_(False)]
        total_count = await AsyncQueryUtils.count(db, Comment, *conditions)

        result = await db.execute(
            select(Comment)
            .where(*conditions)
            .order_by(desc(Comment.created_at), desc(Comment.id))
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total_count
