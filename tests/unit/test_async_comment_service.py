"""Async unit tests for AsyncCommentService."""

import pytest

from board.core.exceptions import AlreadyDeletedError, ForbiddenError, NotFoundError, ValidationError
from board.services.async_comment import AsyncCommentService
from board.services.async_post import AsyncPostService


class TestCreateComment:

    async def test_create_comment_defaults(self, async_db_session, post, other_user):
        comment = await AsyncCommentService.create_comment(async_db_session, post.id, "Hi", other_user)

        assert comment.post_id == post.id
        assert comment.author_id == other_user.id
        assert comment.parent_id is None
        assert comment.is_reply is False
        assert comment.depth == 0
        assert comment.like_count == 0
        assert comment.deleted is False

    async def test_comment_on_missing_post(self, async_db_session, author):
        with pytest.raises(NotFoundError):
            await AsyncCommentService.create_comment(async_db_session, 12345, "Hi", author)

    async def test_comment_on_deleted_post(self, async_db_session, post, author):
        await AsyncPostService.soft_delete_post(async_db_session, post.id, author)
        with pytest.raises(ValidationError):
            await AsyncCommentService.create_comment(async_db_session, post.id, "Hi", author)

    @pytest.mark.parametrize("content", ["", "   ", "x" * 1001])
    async def test_invalid_content(self, async_db_session, post, author, content):
        with pytest.raises(ValidationError):
            await AsyncCommentService.create_comment(async_db_session, post.id, content, author)


class TestReplies:

    async def test_reply_inherits_post(self, async_db_session, comment, other_user):
        reply = await AsyncCommentService.create_reply(async_db_session, comment.id, "Agreed", other_user)

        assert reply.parent_id == comment.id
        assert reply.post_id == comment.post_id
        assert reply.is_reply is True
        assert reply.depth == 1
        assert reply.can_reply is False

    async def test_reply_to_reply_is_rejected(self, async_db_session, comment, other_user):
        reply = await AsyncCommentService.create_reply(async_db_session, comment.id, "Level one", other_user)

        with pytest.raises(ValidationError, match="cannot reply to a reply"):
            await AsyncCommentService.create_reply(async_db_session, reply.id, "Level two", other_user)

    async def test_reply_to_deleted_comment(self, async_db_session, comment, author):
        await AsyncCommentService.soft_delete_comment(async_db_session, comment.id, author)
        with pytest.raises(ValidationError):
            await AsyncCommentService.create_reply(async_db_session, comment.id, "Late", author)

    async def test_reply_to_missing_parent(self, async_db_session, author):
        with pytest.raises(NotFoundError):
            await AsyncCommentService.create_reply(async_db_session, 777, "Hello?", author)

    async def test_replies_are_in_creation_order(self, async_db_session, comment, author, other_user):
        first = await AsyncCommentService.create_reply(async_db_session, comment.id, "one", other_user)
        second = await AsyncCommentService.create_reply(async_db_session, comment.id, "two", author)
        third = await AsyncCommentService.create_reply(async_db_session, comment.id, "three", other_user)
        await AsyncCommentService.soft_delete_comment(async_db_session, second.id, author)

        replies = await AsyncCommentService.replies_by_parent(async_db_session, comment.id)

        assert [r.id for r in replies] == [first.id, third.id]


class TestUpdateDeleteRestore:

    async def test_author_updates(self, async_db_session, comment, author):
        updated = await AsyncCommentService.update_comment(async_db_session, comment.id, "Edited", author)
        assert updated.content == "Edited"

    async def test_moderator_updates(self, async_db_session, comment, moderator):
        updated = await AsyncCommentService.update_comment(async_db_session, comment.id, "Cleaned", moderator)
        assert updated.content == "Cleaned"

    async def test_other_member_cannot_update_or_delete(self, async_db_session, comment, other_user):
        with pytest.raises(ForbiddenError):
            await AsyncCommentService.update_comment(async_db_session, comment.id, "Mine now", other_user)
        with pytest.raises(ForbiddenError):
            await AsyncCommentService.soft_delete_comment(async_db_session, comment.id, other_user)

    async def test_double_delete_fails_and_restore_clears(self, async_db_session, comment, author):
        deleted = await AsyncCommentService.soft_delete_comment(async_db_session, comment.id, author)
        assert deleted.deleted is True
        assert deleted.deleted_at is not None

        with pytest.raises(AlreadyDeletedError):
            await AsyncCommentService.soft_delete_comment(async_db_session, comment.id, author)

        restored = await AsyncCommentService.restore_comment(async_db_session, comment.id, author)
        assert restored.deleted is False
        assert restored.deleted_at is None

    async def test_deleting_parent_keeps_replies(self, async_db_session, comment, author, other_user):
        reply = await AsyncCommentService.create_reply(async_db_session, comment.id, "reply", other_user)

        await AsyncCommentService.soft_delete_comment(async_db_session, comment.id, author)

        still_there = await AsyncCommentService.get_comment(async_db_session, reply.id)
        assert still_there.deleted is False


class TestCommentQueries:

    async def test_comments_by_post_returns_live_top_level(self, async_db_session, post, author, other_user):
        first = await AsyncCommentService.create_comment(async_db_session, post.id, "first", author)
        await AsyncCommentService.create_reply(async_db_session, first.id, "reply", other_user)
        second = await AsyncCommentService.create_comment(async_db_session, post.id, "second", other_user)
        gone = await AsyncCommentService.create_comment(async_db_session, post.id, "gone", other_user)
        await AsyncCommentService.soft_delete_comment(async_db_session, gone.id, other_user)

        comments, total = await AsyncCommentService.comments_by_post(async_db_session, post.id)

        assert total == 2
        assert [c.id for c in comments] == [first.id, second.id]

    async def test_all_comments_by_post_includes_replies(self, async_db_session, post, author, other_user):
        first = await AsyncCommentService.create_comment(async_db_session, post.id, "first", author)
        await AsyncCommentService.create_reply(async_db_session, first.id, "reply", other_user)

        comments, total = await AsyncCommentService.all_comments_by_post(async_db_session, post.id)

        assert total == 2
        assert {c.is_reply for c in comments} == {True, False}

    async def test_comments_by_author(self, async_db_session, post, author, other_user):
        await AsyncCommentService.create_comment(async_db_session, post.id, "a", author)
        await AsyncCommentService.create_comment(async_db_session, post.id, "b", other_user)
        await AsyncCommentService.create_comment(async_db_session, post.id, "c", other_user)

        comments, total = await AsyncCommentService.comments_by_author(async_db_session, other_user.id)

        assert total == 2
        assert all(c.author_id == other_user.id for c in comments)
