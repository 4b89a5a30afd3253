"""Async user profile service.

Public profile lookups, per-user activity statistics and self-service
profile edits. Users are addressed by username, the identifier shown on
the board.
"""

from typing import Any, Dict, List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from board.core.exceptions import DuplicateResourceError
from board.db.base_class import utc_now
from board.models.comment import Comment
from board.models.post import Post
from board.models.user import User
from board.services.async_auth import AsyncAuthService
from board.services.async_comment import AsyncCommentService
from board.services.async_post import AsyncPostService
from board.services.base import AsyncQueryUtils


class AsyncUserProfileService:
    """Async service class for user profile operations."""

    @staticmethod
    async def get_user_profile(db: AsyncSession, username: str) -> Dict[str, Any]:
        """Profile fields of a user with the derived dormant and new-user flags."""
        user = await AsyncAuthService.require_user_by_username(db, username)
        return {
            "username": user.username,
            "nickname": user.nickname,
            "email": user.email,
            "role": user.role,
            "created_at": user.created_at,
            "last_login_at": user.last_login_at,
            "is_dormant": user.is_dormant,
            "is_new_user": user.is_new_user,
        }

    @staticmethod
    async def get_user_stats(db: AsyncSession, username: str) -> Dict[str, Any]:
        """Live post and comment counts of a user."""
        user = await AsyncAuthService.require_user_by_username(db, username)
        post_count = await AsyncQueryUtils.count(db, Post, Post.author_id == user.id, Post.deleted.is_(False))
        comment_count = await AsyncQueryUtils.count(
            db, Comment, Comment.author_id == user.id, Comment.deleted.is_(False)
        )
        return {
            "username": user.username,
            "post_count": post_count,
            "comment_count": comment_count,
            "total_activity_count": post_count + comment_count,
        }

    @staticmethod
    async def get_user_posts(
        db: AsyncSession, username: str, limit: int = 20, offset: int = 0
    ) -> Tuple[List[Post], int]:
        user = await AsyncAuthService.require_user_by_username(db, username)
        return await AsyncPostService.posts_by_author(db, user.id, limit=limit, offset=offset)

    @staticmethod
    async def get_user_comments(
        db: AsyncSession, username: str, limit: int = 20, offset: int = 0
    ) -> Tuple[List[Comment], int]:
        user = await AsyncAuthService.require_user_by_username(db, username)
        return await AsyncCommentService.comments_by_author(db, user.id, limit=limit, offset=offset)

    @staticmethod
    async def update_profile(db: AsyncSession, user: User, nickname: str, email: str) -> User:
        """Change the acting user's nickname and email. The email must not belong to another user."""
        AsyncAuthService.validate_nickname(nickname)
        AsyncAuthService.validate_email(email)

        if email != user.email:
            owner = await AsyncAuthService.get_user_by_email(db, email)
            if owner is not None and owner.id != user.id:
                raise DuplicateResourceError(f"Email already exists: {email}")

        user.nickname = nickname
        user.email = email
        user.updated_at = utc_now()
        await db.commit()
        return user
