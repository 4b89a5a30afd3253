"""Async unit tests for AsyncAdminService and the three end-to-end moderation scenarios."""

import pytest
from sqlalchemy.dialects import postgresql

from board.core.exceptions import AlreadyDeletedError, ForbiddenError, NotFoundError, ValidationError
from board.models.enums import ReportStatus, ReportTargetType, Role
from board.services.async_admin import AsyncAdminService, moderators_for_update
from board.services.async_comment import AsyncCommentService
from board.services.async_like import AsyncCommentLikeService
from board.services.async_post import AsyncPostService
from board.services.async_report import AsyncReportService
from board.services.async_vote import AsyncVoteService


class TestForceDelete:

    async def test_moderator_force_deletes_post(self, async_db_session, post, moderator):
        deleted = await AsyncAdminService.force_delete_post(async_db_session, post.id, moderator)
        assert deleted.deleted is True

        with pytest.raises(AlreadyDeletedError):
            await AsyncAdminService.force_delete_post(async_db_session, post.id, moderator)

    async def test_moderator_force_deletes_comment(self, async_db_session, comment, moderator):
        deleted = await AsyncAdminService.force_delete_comment(async_db_session, comment.id, moderator)
        assert deleted.deleted is True

        with pytest.raises(AlreadyDeletedError):
            await AsyncAdminService.force_delete_comment(async_db_session, comment.id, moderator)

    async def test_member_cannot_force_delete(self, async_db_session, post, author):
        with pytest.raises(ForbiddenError):
            await AsyncAdminService.force_delete_post(async_db_session, post.id, author)


class TestRoles:

    async def test_promote_member(self, async_db_session, other_user, moderator):
        promoted = await AsyncAdminService.change_user_role(
            async_db_session, other_user.username, Role.MODERATOR, moderator
        )
        assert promoted.role == Role.MODERATOR
        assert promoted.is_moderator is True

    async def test_member_cannot_change_roles(self, async_db_session, author, other_user):
        with pytest.raises(ForbiddenError):
            await AsyncAdminService.change_user_role(async_db_session, other_user.username, Role.MODERATOR, author)

    async def test_unknown_username(self, async_db_session, moderator):
        with pytest.raises(NotFoundError):
            await AsyncAdminService.change_user_role(async_db_session, "ghost", Role.MEMBER, moderator)

    async def test_last_moderator_cannot_be_demoted(self, async_db_session, moderator):
        with pytest.raises(ValidationError):
            await AsyncAdminService.change_user_role(async_db_session, moderator.username, Role.MEMBER, moderator)

    async def test_self_demotion_allowed_with_another_moderator(self, async_db_session, make_user, moderator):
        await make_user("mod2", role=Role.MODERATOR)

        demoted = await AsyncAdminService.change_user_role(
            async_db_session, moderator.username, Role.MEMBER, moderator
        )
        assert demoted.role == Role.MEMBER

    def test_moderator_lock_statement_uses_for_update(self):
        compiled = str(moderators_for_update().compile(dialect=postgresql.dialect()))
        assert compiled.rstrip().endswith("FOR UPDATE")
        assert "users.role" in compiled

    async def test_guard_counts_locked_moderators(self, async_db_session, make_user, moderator, monkeypatch):
        second = await make_user("mod2", role=Role.MODERATOR)
        statements = []
        real_execute = async_db_session.execute

        async def recording_execute(statement, *args, **kwargs):
            statements.append(statement)
            return await real_execute(statement, *args, **kwargs)

        monkeypatch.setattr(async_db_session, "execute", recording_execute)

        await AsyncAdminService.change_user_role(async_db_session, second.username, Role.MEMBER, moderator)
        compiled = [str(s.compile(dialect=postgresql.dialect())) for s in statements]
        assert any(sql.rstrip().endswith("FOR UPDATE") and "users.role" in sql for sql in compiled)

        with pytest.raises(ValidationError):
            await AsyncAdminService.change_user_role(async_db_session, moderator.username, Role.MEMBER, moderator)


class TestAdminQueries:

    async def test_admin_stats(self, async_db_session, post, comment, author, moderator):
        extra = await AsyncPostService.create_post(async_db_session, "Extra", "Body", None, author)
        await AsyncPostService.soft_delete_post(async_db_session, extra.id, author)
        await AsyncCommentService.soft_delete_comment(async_db_session, comment.id, author)

        stats = await AsyncAdminService.admin_stats(async_db_session, moderator)

        assert stats == {
            "total_users": 2,
            "total_posts": 2,
            "active_posts": 1,
            "deleted_posts": 1,
            "total_comments": 1,
            "active_comments": 0,
            "deleted_comments": 1,
        }

    async def test_listings_include_deleted(self, async_db_session, post, author, moderator):
        await AsyncPostService.soft_delete_post(async_db_session, post.id, author)

        posts, total = await AsyncAdminService.list_all_posts(async_db_session, moderator)
        assert total == 1
        assert posts[0].deleted is True

        users, user_total = await AsyncAdminService.list_all_users(async_db_session, moderator)
        assert user_total == 2
        assert {u.username for u in users} == {"alice", "mod"}

        comments, comment_total = await AsyncAdminService.list_all_comments(async_db_session, moderator)
        assert comment_total == 0
        assert comments == []

    async def test_listings_require_moderator(self, async_db_session, author):
        with pytest.raises(ForbiddenError):
            await AsyncAdminService.list_all_posts(async_db_session, author)
        with pytest.raises(ForbiddenError):
            await AsyncAdminService.admin_stats(async_db_session, author)


class TestModerationScenarios:

    async def test_report_then_force_delete(self, async_db_session, post, other_user, moderator):
        report = await AsyncReportService.report_post(async_db_session, post.id, other_user.id, "off-topic")

        await AsyncAdminService.force_delete_post(async_db_session, post.id, moderator)
        resolved = await AsyncReportService.update_report_status(
            async_db_session, ReportTargetType.POST, report.id, ReportStatus.RESOLVED, moderator
        )

        stats = await AsyncReportService.report_stats(async_db_session)
        assert resolved.status == ReportStatus.RESOLVED
        assert stats["pending_post_reports"] == 0
        assert stats["resolved_post_reports"] == 1
        with pytest.raises(ValidationError):
            await AsyncPostService.get_post(async_db_session, post.id)

    async def test_thread_with_reactions(self, async_db_session, post, author, other_user):
        top = await AsyncCommentService.create_comment(async_db_session, post.id, "Question?", other_user)
        answer = await AsyncCommentService.create_reply(async_db_session, top.id, "Answer.", author)

        await AsyncVoteService.vote(async_db_session, post.id, other_user.id, up=True)
        await AsyncCommentLikeService.toggle_like(async_db_session, answer.id, other_user.id)

        refreshed = await AsyncPostService.get_post(async_db_session, post.id)
        assert refreshed.like_count == 1
        assert await AsyncCommentLikeService.like_count(async_db_session, answer.id) == 1
        assert [r.id for r in await AsyncCommentService.replies_by_parent(async_db_session, top.id)] == [answer.id]

    async def test_notice_pinned_above_newer_posts(self, async_db_session, author, moderator):
        notice = await AsyncPostService.create_post(async_db_session, "Rules", "Be nice", None, moderator)
        await AsyncPostService.create_post(async_db_session, "Newer", "Body", None, author)
        await AsyncPostService.set_notice(async_db_session, notice.id, True, moderator)

        posts, _ = await AsyncPostService.list_posts(async_db_session)

        assert posts[0].id == notice.id
