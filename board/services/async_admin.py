from typing import Dict, List, Tuple

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from board.core.exceptions import AlreadyDeletedError, ValidationError
from board.db.base_class import utc_now
from board.models.comment import Comment
from board.models.enums import Role
from board.models.post import Post
from board.models.user import User
from board.services.async_auth import AsyncAuthService
from board.services.base import AsyncQueryUtils
from board.services.permissions import require_moderator
from board.utils.logger import admin_logger


def moderators_for_update():
    """Moderator ids, row-locked until the transaction ends."""
    return select(User.id).where(User.role == Role.MODERATOR).order_by(User.id).with_for_update()


class AsyncAdminService:
    """
    Moderator-only operations.

    Every method checks the acting user's role before touching the database.
    Force deletes bypass ownership but still refuse an already-deleted target.
    """

    @staticmethod
    async def force_delete_post(db: AsyncSession, post_id: int, moderator: User) -> Post:
        require_moderator(moderator, "force delete a post")
        post = await AsyncQueryUtils.get_or_raise(db, Post, post_id, for_update=True, label="Post")
        if post.deleted:
            raise AlreadyDeletedError(f"Post is already deleted: {post_id}")

        post.soft_delete()
        await db.commit()

        admin_logger.warning("Post force-deleted", "FORCE_DELETE", post_id=post_id,
                             author_id=post.author_id, moderator_id=moderator.id)
        return post

    @staticmethod
    async def force_delete_comment(db: AsyncSession, comment_id: int, moderator: User) -> Comment:
        require_moderator(moderator, "force delete a comment")
        comment = await AsyncQueryUtils.get_or_raise(db, Comment, comment_id, for_update=True, label="Comment")
        if comment.deleted:
            raise AlreadyDeletedError(f"Comment is already deleted: {comment_id}")

        comment.soft_delete()
        await db.commit()

        admin_logger.warning("Comment force-deleted", "FORCE_DELETE", comment_id=comment_id,
                             author_id=comment.author_id, moderator_id=moderator.id)
        return comment

    @staticmethod
    async def change_user_role(db: AsyncSession, target_username: str, new_role: Role, moderator: User) -> User:
        """
        Set a user's role.

        A moderator may demote themselves while another moderator exists.
        Demoting the last moderator is rejected so the board always keeps one.
        """
        require_moderator(moderator, "change user roles")
        target = await AsyncAuthService.require_user_by_username(db, target_username)

        if target.role == Role.MODERATOR and new_role != Role.MODERATOR:
            # Concurrent demotions serialize on the moderator rows
            locked = await db.execute(moderators_for_update())
            if len(locked.scalars().all()) <= 1:
                raise ValidationError("Cannot demote the last moderator")

        previous = target.role
        target.role = new_role
        target.updated_at = utc_now()
        await db.commit()

        admin_logger.info("User role changed", "ROLE", username=target_username,
                          previous=previous.value, role=new_role.value, moderator_id=moderator.id)
        return target

    @staticmethod
    async def admin_stats(db: AsyncSession, moderator: User) -> Dict[str, int]:
        require_moderator(moderator, "view admin statistics")

        total_users = await AsyncQueryUtils.count(db, User)
        total_posts = await AsyncQueryUtils.count(db, Post)
        active_posts = await AsyncQueryUtils.count(db, Post, Post.deleted.is_(False))
        total_comments = await AsyncQueryUtils.count(db, Comment)
        active_comments = await AsyncQueryUtils.count(db, Comment, Comment.deleted.is_(False))

        return {
            "total_users": total_users,
            "total_posts": total_posts,
            "active_posts": active_posts,
            "deleted_posts": total_posts - active_posts,
            "total_comments": total_comments,
            "active_comments": active_comments,
            "deleted_comments": total_comments - active_comments,
        }

    @staticmethod
    async def list_all_posts(
        db: AsyncSession,
        moderator: User,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Post], int]:
        """Every post including soft-deleted ones, newest first."""
        require_moderator(moderator, "list all posts")
        total_count = await AsyncQueryUtils.count(db, Post)
        result = await db.execute(
            select(Post).order_by(desc(Post.created_at), desc(Post.id)).offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total_count

    @staticmethod
    async def list_all_comments(
        db: AsyncSession,
        moderator: User,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Comment], int]:
        """Every comment including soft-deleted ones, newest first."""
        require_moderator(moderator, "list all comments")
        total_count = await AsyncQueryUtils.count(db, Comment)
        result = await db.execute(
            select(Comment).order_by(desc(Comment.created_at), desc(Comment.id)).offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total_count

    @staticmethod
    async def list_all_users(
        db: AsyncSession,
        moderator: User,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[User], int]:
        require_moderator(moderator, "list all users")
        total_count = await AsyncQueryUtils.count(db, User)
        result = await db.execute(
            select(User).order_by(desc(User.created_at), desc(User.id)).offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total_count
