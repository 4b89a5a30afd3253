from typing import List, Optional, Tuple

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from board.core.config import settings
from board.core.exceptions import AlreadyDeletedError, ValidationError
from board.db.base_class import utc_now
from board.models.comment import Comment
from board.models.post import Post
from board.models.user import User
from board.services.base import AsyncQueryUtils
from board.services.permissions import require_author_or_moderator, require_moderator
from board.utils.logger import post_logger


class AsyncPostService:
    """
    Post lifecycle: create, update, soft delete, restore, notice flag and view counter.

    ``like_count`` is never written here; only the vote engine moves it.
    """

    @staticmethod
    def validate_post_fields(title: Optional[str], content: Optional[str], category: Optional[str] = None) -> None:
        """Raise ValidationError for an empty or oversized title, empty content or oversized category."""
        if title is None or not title.strip():
            raise ValidationError("Title is required")
        if len(title) > settings.POST_TITLE_MAX_LENGTH:
            raise ValidationError(f"Title cannot exceed {settings.POST_TITLE_MAX_LENGTH} characters")
        if content is None or not content.strip():
            raise ValidationError("Content is required")
        if category is not None and len(category) > settings.POST_CATEGORY_MAX_LENGTH:
            raise ValidationError(f"Category cannot exceed {settings.POST_CATEGORY_MAX_LENGTH} characters")

    @staticmethod
    async def create_post(
        db: AsyncSession,
        title: str,
        content: str,
        category: Optional[str],
        author: User
    ) -> Post:
        """Create a post with zeroed counters, not deleted and not a notice."""
        if author is None:
            raise ValidationError("Author is required")
        AsyncPostService.validate_post_fields(title, content, category)

        now = utc_now()
        post = Post(
            title=title,
            content=content,
            category=category,
            author=author,
            view_count=0,
            like_count=0,
            is_notice=False,
            deleted=False,
            created_at=now,
            updated_at=now,
        )

        db.add(post)
        await db.commit()

        post_logger.success("Post created", "CREATE", post_id=post.id, author_id=author.id)
        return post

    @staticmethod
    async def get_post(db: AsyncSession, post_id: int, *, include_deleted: bool = False) -> Post:
        """Load a post; NotFoundError if absent, ValidationError if soft-deleted unless ``include_deleted``."""
        post = await AsyncQueryUtils.get_or_raise(db, Post, post_id, label="Post")
        if post.deleted and not include_deleted:
            raise ValidationError(f"Post is deleted: {post_id}")
        return post

    @staticmethod
    async def _get_live_post_for_update(db: AsyncSession, post_id: int) -> Post:
        post = await AsyncQueryUtils.get_or_raise(db, Post, post_id, for_update=True, label="Post")
        if post.deleted:
            raise ValidationError(f"Post is deleted: {post_id}")
        return post

    @staticmethod
    async def update_post(
        db: AsyncSession,
        post_id: int,
        title: str,
        content: str,
        category: Optional[str],
        requesting_user: User
    ) -> Post:
        """Update title, content and category. Author or moderator only."""
        post = await AsyncPostService._get_live_post_for_update(db, post_id)
        require_author_or_moderator(post, requesting_user, "edit this post")
        AsyncPostService.validate_post_fields(title, content, category)

        post.title = title
        post.content = content
        post.category = category
        post.updated_at = utc_now()

        await db.commit()

        post_logger.info("Post updated", "UPDATE", post_id=post.id, user_id=requesting_user.id)
        return post

    @staticmethod
    async def soft_delete_post(db: AsyncSession, post_id: int, requesting_user: User) -> Post:
        """
        Mark a post deleted. Author or moderator only.

        Comments on the post are left untouched; deleting a post never
        cascades to its comment tree.
        """
        post = await AsyncQueryUtils.get_or_raise(db, Post, post_id, for_update=True, label="Post")
        if post.deleted:
            raise AlreadyDeletedError(f"Post is already deleted: {post_id}")
        require_author_or_moderator(post, requesting_user, "delete this post")

        post.soft_delete()
        await db.commit()

        post_logger.info("Post soft-deleted", "DELETE", post_id=post.id, user_id=requesting_user.id)
        return post

    @staticmethod
    async def restore_post(db: AsyncSession, post_id: int, requesting_user: User) -> Post:
        """Undo a soft delete. Author or moderator only."""
        post = await AsyncQueryUtils.get_or_raise(db, Post, post_id, for_update=True, label="Post")
        if not post.deleted:
            raise ValidationError(f"Post is not deleted: {post_id}")
        require_author_or_moderator(post, requesting_user, "restore this post")

        post.restore()
        await db.commit()

        post_logger.info("Post restored", "RESTORE", post_id=post.id, user_id=requesting_user.id)
        return post

    @staticmethod
    async def set_notice(db: AsyncSession, post_id: int, flag: bool, requesting_user: User) -> Post:
        """Pin or unpin a post as a notice. Moderator only."""
        require_moderator(requesting_user, "change the notice flag")
        post = await AsyncPostService._get_live_post_for_update(db, post_id)

        post.is_notice = flag
        post.updated_at = utc_now()
        await db.commit()

        post_logger.info("Notice flag changed", "NOTICE", post_id=post.id, is_notice=flag)
        return post

    @staticmethod
    async def increase_view_count(db: AsyncSession, post_id: int) -> Post:
        """
        Add one view. The caller has already decided this view counts.

        The increment is a single UPDATE so concurrent views serialize on the
        row instead of overwriting each other.
        """
        post = await AsyncPostService.get_post(db, post_id)

        await db.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(view_count=Post.view_count + 1)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        await db.refresh(post)

        post_logger.debug("View counted", "VIEW", post_id=post_id, view_count=post.view_count)
        return post

    @staticmethod
    async def list_posts(
        db: AsyncSession,
        limit: int = 20,
        offset: int = 0,
        category: Optional[str] = None
    ) -> Tuple[List[Post], int]:
        """Live posts, notices first, newest first."""
        conditions = [Post.deleted.is_(False)]
        if category is not None:
            conditions.append(Post.category == category)

        total_count = await AsyncQueryUtils.count(db, Post, *conditions)

        result = await db.execute(
            select(Post)
            .where(*conditions)
            .order_by(desc(Post.is_notice), desc(Post.created_at), desc(Post.id))
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total_count

    @staticmethod
    async def posts_by_author(
        db: AsyncSession,
        author_id: int,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Post], int]:
        """Live posts written by one user, newest first."""
        conditions = [Post.author_id == author_id, Post.deleted.is_(False)]
        total_count = await AsyncQueryUtils.count(db, Post, *conditions)

        result = await db.execute(
            select(Post)
            .where(*conditions)
            .order_by(desc(Post.created_at), desc(Post.id))
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total_count

    @staticmethod
    async def comment_count(db: AsyncSession, post_id: int) -> int:
        """Number of live comments and replies on a post."""
        await AsyncQueryUtils.get_or_raise(db, Post, post_id, label="Post")
        return await AsyncQueryUtils.count(
            db, Comment, Comment.post_id == post_id, Comment.deleted.is_(False)
        )
