"""
Async unit tests for AsyncPostService.

Covers creation defaults, field validation, author/moderator permissions,
soft delete and restore, the notice flag, view counting and the listing
queries.
"""

import pytest

from board.core.exceptions import AlreadyDeletedError, ForbiddenError, NotFoundError, ValidationError
from board.models.comment import Comment
from board.services.async_comment import AsyncCommentService
from board.services.async_post import AsyncPostService


class TestCreatePost:

    async def test_create_post_defaults(self, async_db_session, author):
        post = await AsyncPostService.create_post(
            async_db_session, title="Title", content="Body", category=None, author=author
        )

        assert post.id is not None
        assert post.author_id == author.id
        assert post.view_count == 0
        assert post.like_count == 0
        assert post.deleted is False
        assert post.deleted_at is None
        assert post.is_notice is False
        assert post.is_popular is False

    @pytest.mark.parametrize("title, content, category", [
        ("", "Body", None),
        ("   ", "Body", None),
        ("x" * 201, "Body", None),
        ("Title", "", None),
        ("Title", "Body", "c" * 51),
    ])
    async def test_create_post_rejects_invalid_fields(self, async_db_session, author, title, content, category):
        with pytest.raises(ValidationError):
            await AsyncPostService.create_post(
                async_db_session, title=title, content=content, category=category, author=author
            )

    async def test_title_at_limit_is_accepted(self, async_db_session, author):
        post = await AsyncPostService.create_post(
            async_db_session, title="x" * 200, content="Body", category=None, author=author
        )
        assert len(post.title) == 200

    async def test_missing_author_is_rejected(self, async_db_session):
        with pytest.raises(ValidationError):
            await AsyncPostService.create_post(
                async_db_session, title="Title", content="Body", category=None, author=None
            )


class TestGetPost:

    async def test_unknown_post_is_not_found(self, async_db_session):
        with pytest.raises(NotFoundError):
            await AsyncPostService.get_post(async_db_session, 999)

    async def test_deleted_post_is_hidden_unless_requested(self, async_db_session, post, author):
        await AsyncPostService.soft_delete_post(async_db_session, post.id, author)

        with pytest.raises(ValidationError):
            await AsyncPostService.get_post(async_db_session, post.id)

        found = await AsyncPostService.get_post(async_db_session, post.id, include_deleted=True)
        assert found.deleted is True


class TestUpdatePost:

    async def test_author_can_update(self, async_db_session, post, author):
        updated = await AsyncPostService.update_post(
            async_db_session, post.id, "New title", "New body", "news", author
        )
        assert updated.title == "New title"
        assert updated.content == "New body"
        assert updated.category == "news"

    async def test_moderator_can_update_any_post(self, async_db_session, post, moderator):
        updated = await AsyncPostService.update_post(
            async_db_session, post.id, "Edited", "By moderator", None, moderator
        )
        assert updated.title == "Edited"
        assert updated.author_id != moderator.id

    async def test_other_member_is_forbidden(self, async_db_session, post, other_user):
        with pytest.raises(ForbiddenError):
            await AsyncPostService.update_post(async_db_session, post.id, "Hijack", "Body", None, other_user)

    async def test_deleted_post_cannot_be_updated(self, async_db_session, post, author):
        await AsyncPostService.soft_delete_post(async_db_session, post.id, author)
        with pytest.raises(ValidationError):
            await AsyncPostService.update_post(async_db_session, post.id, "Title", "Body", None, author)


class TestSoftDeleteAndRestore:

    async def test_double_delete_fails_and_restore_clears(self, async_db_session, post, author):
        deleted = await AsyncPostService.soft_delete_post(async_db_session, post.id, author)
        assert deleted.deleted is True
        assert deleted.deleted_at is not None

        with pytest.raises(AlreadyDeletedError):
            await AsyncPostService.soft_delete_post(async_db_session, post.id, author)

        restored = await AsyncPostService.restore_post(async_db_session, post.id, author)
        assert restored.deleted is False
        assert restored.deleted_at is None

    async def test_restore_of_live_post_fails(self, async_db_session, post, author):
        with pytest.raises(ValidationError):
            await AsyncPostService.restore_post(async_db_session, post.id, author)

    async def test_other_member_cannot_delete(self, async_db_session, post, other_user):
        with pytest.raises(ForbiddenError):
            await AsyncPostService.soft_delete_post(async_db_session, post.id, other_user)

    async def test_delete_does_not_cascade_to_comments(self, async_db_session, post, author, other_user):
        comment = await AsyncCommentService.create_comment(async_db_session, post.id, "Still here", other_user)

        await AsyncPostService.soft_delete_post(async_db_session, post.id, author)

        reloaded = await async_db_session.get(Comment, comment.id)
        assert reloaded.deleted is False


class TestNoticeAndViews:

    async def test_only_moderator_sets_notice(self, async_db_session, post, author, moderator):
        with pytest.raises(ForbiddenError):
            await AsyncPostService.set_notice(async_db_session, post.id, True, author)

        pinned = await AsyncPostService.set_notice(async_db_session, post.id, True, moderator)
        assert pinned.is_notice is True

    async def test_increase_view_count(self, async_db_session, post):
        await AsyncPostService.increase_view_count(async_db_session, post.id)
        counted = await AsyncPostService.increase_view_count(async_db_session, post.id)
        assert counted.view_count == 2

    async def test_view_count_on_deleted_post_fails(self, async_db_session, post, author):
        await AsyncPostService.soft_delete_post(async_db_session, post.id, author)
        with pytest.raises(ValidationError):
            await AsyncPostService.increase_view_count(async_db_session, post.id)

    async def test_popular_by_views(self, async_db_session, post):
        post.view_count = 100
        await async_db_session.commit()
        assert post.is_popular is True


class TestListings:

    async def test_list_posts_puts_notices_first_and_hides_deleted(self, async_db_session, author, moderator):
        first = await AsyncPostService.create_post(async_db_session, "First", "Body", None, author)
        second = await AsyncPostService.create_post(async_db_session, "Second", "Body", None, author)
        gone = await AsyncPostService.create_post(async_db_session, "Gone", "Body", None, author)
        await AsyncPostService.soft_delete_post(async_db_session, gone.id, author)
        await AsyncPostService.set_notice(async_db_session, first.id, True, moderator)

        posts, total = await AsyncPostService.list_posts(async_db_session)

        assert total == 2
        assert [p.id for p in posts] == [first.id, second.id]

    async def test_list_posts_by_category(self, async_db_session, author):
        await AsyncPostService.create_post(async_db_session, "A", "Body", "qna", author)
        await AsyncPostService.create_post(async_db_session, "B", "Body", "free", author)

        posts, total = await AsyncPostService.list_posts(async_db_session, category="qna")

        assert total == 1
        assert posts[0].title == "A"

    async def test_posts_by_author(self, async_db_session, author, other_user):
        await AsyncPostService.create_post(async_db_session, "Mine", "Body", None, author)
        await AsyncPostService.create_post(async_db_session, "Theirs", "Body", None, other_user)

        posts, total = await AsyncPostService.posts_by_author(async_db_session, author.id)

        assert total == 1
        assert posts[0].title == "Mine"

    async def test_comment_count_skips_deleted(self, async_db_session, post, author):
        keep = await AsyncCommentService.create_comment(async_db_session, post.id, "keep", author)
        await AsyncCommentService.create_reply(async_db_session, keep.id, "reply", author)
        drop = await AsyncCommentService.create_comment(async_db_session, post.id, "drop", author)
        await AsyncCommentService.soft_delete_comment(async_db_session, drop.id, author)

        assert await AsyncPostService.comment_count(async_db_session, post.id) == 2
