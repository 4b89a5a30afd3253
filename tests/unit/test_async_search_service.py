"""Async unit tests for AsyncSearchService."""

from sqlalchemy.dialects import sqlite

from board.core.config import settings
from board.services.async_comment import AsyncCommentService
from board.services.async_post import AsyncPostService
from board.services.async_search import AsyncSearchService, escape_like, normalize_keyword


async def _titles(db, *args, **kwargs):
    posts, total = await AsyncSearchService.search(db, *args, **kwargs)
    return sorted(p.title for p in posts), total


class TestKeywordNormalization:

    def test_trims_and_collapses_whitespace(self):
        assert normalize_keyword("  hello   big \t world ") == "hello big world"

    def test_blank_keyword(self):
        assert normalize_keyword(None) == ""
        assert normalize_keyword("   ") == ""

    def test_truncates_long_keyword(self):
        assert len(normalize_keyword("k" * 250)) == settings.SEARCH_KEYWORD_MAX_LENGTH

    def test_escapes_wildcards(self):
        assert escape_like("50%_off") == "50\\%\\_off"

    def test_category_condition_is_exact(self):
        condition = AsyncSearchService.keyword_condition("category", "news")
        compiled = str(condition.compile(dialect=sqlite.dialect()))
        assert "LIKE" not in compiled.upper()


class TestSearch:

    async def test_blank_keyword_returns_empty_page(self, async_db_session, post):
        posts, total = await AsyncSearchService.search(async_db_session, "title", "   ")
        assert posts == []
        assert total == 0

    async def test_title_search_is_case_insensitive(self, async_db_session, post):
        assert await _titles(async_db_session, "title", "hELLo") == (["Hello"], 1)

    async def test_content_search(self, async_db_session, post, author):
        await AsyncPostService.create_post(async_db_session, "Other", "Nothing here", None, author)
        assert await _titles(async_db_session, "content", "first") == (["Hello"], 1)

    async def test_wildcards_match_literally(self, async_db_session, author):
        await AsyncPostService.create_post(async_db_session, "100% done", "body", None, author)
        await AsyncPostService.create_post(async_db_session, "1000 done", "body", None, author)
        await AsyncPostService.create_post(async_db_session, "snake_case", "body", None, author)
        await AsyncPostService.create_post(async_db_session, "snakeXcase", "body", None, author)

        assert await _titles(async_db_session, "title", "0%") == (["100% done"], 1)
        assert await _titles(async_db_session, "title", "e_c") == (["snake_case"], 1)

    async def test_author_search_uses_nickname(self, async_db_session, post, other_user):
        await AsyncPostService.create_post(async_db_session, "Bob's post", "body", None, other_user)
        assert await _titles(async_db_session, "author", "ali") == (["Hello"], 1)

    async def test_category_search(self, async_db_session, post, author):
        await AsyncPostService.create_post(async_db_session, "News", "body", "news", author)
        assert await _titles(async_db_session, "category", "general") == (["Hello"], 1)

    async def test_comment_search_ignores_deleted_comments(self, async_db_session, post, author):
        other = await AsyncPostService.create_post(async_db_session, "Quiet", "body", None, author)
        hidden = await AsyncCommentService.create_comment(async_db_session, other.id, "secret word", author)
        await AsyncCommentService.soft_delete_comment(async_db_session, hidden.id, author)
        await AsyncCommentService.create_comment(async_db_session, post.id, "the secret is out", author)

        assert await _titles(async_db_session, "comment", "secret") == (["Hello"], 1)

    async def test_all_fields(self, async_db_session, post, author, other_user):
        await AsyncPostService.create_post(async_db_session, "By Bob", "body", None, other_user)
        await AsyncPostService.create_post(async_db_session, "Unrelated", "body", None, other_user)

        assert await _titles(async_db_session, "all", "alice") == (["Hello"], 1)
        assert await _titles(async_db_session, "all", "bob") == (["By Bob", "Unrelated"], 2)

    async def test_unknown_type_searches_title_and_content(self, async_db_session, post, author):
        await AsyncPostService.create_post(async_db_session, "First steps", "body", None, author)
        assert await _titles(async_db_session, "bogus", "first") == (["First steps", "Hello"], 2)

    async def test_deleted_posts_are_excluded(self, async_db_session, post, author):
        await AsyncPostService.soft_delete_post(async_db_session, post.id, author)
        assert await _titles(async_db_session, "title", "hello") == ([], 0)

    async def test_category_and_author_filters(self, async_db_session, post, author, other_user):
        await AsyncPostService.create_post(async_db_session, "Hello news", "body", "news", author)
        await AsyncPostService.create_post(async_db_session, "Hello from Bob", "body", "general", other_user)

        assert await _titles(async_db_session, "title", "hello", category="news") == (["Hello news"], 1)
        assert await _titles(async_db_session, "title", "hello", author="bob") == (["Hello from Bob"], 1)

    async def test_pagination(self, async_db_session, author):
        for i in range(3):
            await AsyncPostService.create_post(async_db_session, f"Topic {i}", "body", None, author)

        posts, total = await AsyncSearchService.search(async_db_session, "title", "topic", limit=2, offset=2)
        assert total == 3
        assert len(posts) == 1
