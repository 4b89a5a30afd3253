from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from board.core.exceptions import DuplicateVoteError, ValidationError
from board.models.post import Post
from board.models.post_vote import PostVote
from board.models.user import User
from board.services.async_error_handler import retry_once_on_integrity_error
from board.services.base import AsyncQueryUtils
from board.utils.logger import reaction_logger


class AsyncVoteService:
    """
    Up/down votes on posts.

    Each (post, user) pair is in one of three states: none, upvoted or
    downvoted. ``Post.like_count`` tracks upvote transitions only, so a
    downvote from none leaves it unchanged while switching from up to down
    takes one away. The derived counts from ``upvote_count`` and
    ``downvote_count`` are the authoritative tallies.

    Every transition locks the post row before reading the vote row. The
    unique (post_id, user_id) constraint catches the remaining insert race,
    and the transition is then run once more against the committed row.
    """

    @staticmethod
    async def _find_vote(db: AsyncSession, post_id: int, user_id: int) -> Optional[PostVote]:
        result = await db.execute(
            select(PostVote).where(PostVote.post_id == post_id, PostVote.user_id == user_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def vote(db: AsyncSession, post_id: int, user_id: int, up: bool) -> Post:
        """
        Cast or switch a vote.

        Args:
            db: Async database session
            post_id: Post being voted on
            user_id: Voting user
            up: True for an upvote, False for a downvote

        Returns:
            The post with its updated ``like_count``

        Raises:
            NotFoundError: Post or user does not exist
            ValidationError: Post is soft-deleted
            DuplicateVoteError: The retry after a unique-constraint race collided again
        """

        async def transition() -> Post:
            post = await AsyncQueryUtils.get_or_raise(db, Post, post_id, for_update=True, label="Post")
            if post.deleted:
                raise ValidationError(f"Cannot vote on a deleted post: {post_id}")
            await AsyncQueryUtils.get_or_raise(db, User, user_id, label="User")

            existing = await AsyncVoteService._find_vote(db, post_id, user_id)
            if existing is None:
                db.add(PostVote(post_id=post_id, user_id=user_id, is_upvote=up))
                if up:
                    post.like_count += 1
                action = "insert"
            elif existing.is_upvote == up:
                action = "noop"
            else:
                existing.is_upvote = up
                post.like_count += 1 if up else -1
                action = "switch"

            await db.commit()
            reaction_logger.info("Vote applied", "VOTE", post_id=post_id, user_id=user_id,
                                 up=up, action=action, like_count=post.like_count)
            return post

        return await retry_once_on_integrity_error(
            db, transition, race_error=DuplicateVoteError, operation_name="vote"
        )

    @staticmethod
    async def cancel_vote(db: AsyncSession, post_id: int, user_id: int) -> Post:
        """Remove the user's vote if there is one. Cancelling an upvote takes one like away."""
        post = await AsyncQueryUtils.get_or_raise(db, Post, post_id, for_update=True, label="Post")
        await AsyncQueryUtils.get_or_raise(db, User, user_id, label="User")

        existing = await AsyncVoteService._find_vote(db, post_id, user_id)
        if existing is None:
            await db.commit()
            reaction_logger.debug("No vote to cancel", "CANCEL", post_id=post_id, user_id=user_id)
            return post

        if existing.is_upvote:
            post.like_count -= 1
        await db.delete(existing)
        await db.commit()

        reaction_logger.info("Vote cancelled", "CANCEL", post_id=post_id, user_id=user_id,
                             like_count=post.like_count)
        return post

    @staticmethod
    async def get_vote_status(db: AsyncSession, post_id: int, user_id: int) -> Optional[str]:
        """Return ``"up"``, ``"down"`` or None when the user has not voted."""
        await AsyncQueryUtils.get_or_raise(db, Post, post_id, label="Post")
        existing = await AsyncVoteService._find_vote(db, post_id, user_id)
        if existing is None:
            return None
        return "up" if existing.is_upvote else "down"

    @staticmethod
    async def upvote_count(db: AsyncSession, post_id: int) -> int:
        return await AsyncQueryUtils.count(
            db, PostVote, PostVote.post_id == post_id, PostVote.is_upvote.is_(True)
        )

    @staticmethod
    async def downvote_count(db: AsyncSession, post_id: int) -> int:
        return await AsyncQueryUtils.count(
            db, PostVote, PostVote.post_id == post_id, PostVote.is_upvote.is_(False)
        )
