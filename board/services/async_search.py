"""
Keyword search over live posts.

Keywords are normalized before they reach the database: surrounding
whitespace is trimmed, inner runs of whitespace collapse to one space and
the result is cut to ``SEARCH_KEYWORD_MAX_LENGTH`` characters. ``%`` and
``_`` are escaped so they match literally inside ``ILIKE`` patterns.
"""

import re
import time
from typing import List, Optional, Tuple

from sqlalchemy import desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from board.core.config import settings
from board.models.comment import Comment
from board.models.post import Post
from board.models.user import User
from board.utils.logger import search_logger

LIKE_ESCAPE = "\\"

SEARCH_TYPES = ("title", "content", "author", "category", "comment", "title_content", "all")
DEFAULT_SEARCH_TYPE = "title_content"


def normalize_keyword(keyword: Optional[str]) -> str:
    """Trim, collapse whitespace and truncate a raw keyword. Returns "" for a blank one."""
    if not keyword:
        return ""
    normalized = re.sub(r"\s+", " ", keyword.strip())
    return normalized[:settings.SEARCH_KEYWORD_MAX_LENGTH]


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _contains(column, keyword: str):
    return column.ilike(f"%{escape_like(keyword)}%", escape=LIKE_ESCAPE)


def _comment_contains(keyword: str):
    return (
        select(Comment.id)
        .where(
            Comment.post_id == Post.id,
            Comment.deleted.is_(False),
            _contains(Comment.content, keyword),
        )
        .exists()
    )


class AsyncSearchService:

    @staticmethod
    def keyword_condition(search_type: str, keyword: str):
        """
        Build the WHERE clause for one search type.

        Unknown search types fall back to title-or-content. ``category``
        matches the category exactly; every other type is a case-insensitive
        substring match.
        """
        if search_type == "title":
            return _contains(Post.title, keyword)
        if search_type == "content":
            return _contains(Post.content, keyword)
        if search_type == "author":
            return _contains(User.nickname, keyword)
        if search_type == "category":
            return Post.category == keyword
        if search_type == "comment":
            return _comment_contains(keyword)
        if search_type == "all":
            return or_(
                _contains(Post.title, keyword),
                _contains(Post.content, keyword),
                _contains(User.nickname, keyword),
                _comment_contains(keyword),
            )
        return or_(_contains(Post.title, keyword), _contains(Post.content, keyword))

    @staticmethod
    async def search(
        db: AsyncSession,
        search_type: str = DEFAULT_SEARCH_TYPE,
        keyword: Optional[str] = None,
        category: Optional[str] = None,
        author: Optional[str] = None,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Post], int]:
        """
        Search live posts, newest first.

        Args:
            db: Async database session
            search_type: One of ``SEARCH_TYPES``
            keyword: Raw keyword; a blank keyword yields an empty page
            category: Optional exact category filter applied on top of the keyword
            author: Optional author-nickname substring filter applied on top of the keyword
            limit: Page size
            offset: Rows to skip

        Returns:
            Matching posts for the page and the total number of matches
        """
        processed = normalize_keyword(keyword)
        if not processed:
            return [], 0

        started = time.time()

        conditions = [Post.deleted.is_(False), AsyncSearchService.keyword_condition(search_type, processed)]
        category_filter = normalize_keyword(category)
        if category_filter:
            conditions.append(Post.category == category_filter)
        author_filter = normalize_keyword(author)
        if author_filter:
            conditions.append(_contains(User.nickname, author_filter))

        total_result = await db.execute(
            select(func.count(Post.id))
            .select_from(Post)
            .join(User, Post.author_id == User.id)
            .where(*conditions)
        )
        total_count = total_result.scalar() or 0

        result = await db.execute(
            select(Post)
            .join(User, Post.author_id == User.id)
            .where(*conditions)
            .order_by(desc(Post.created_at), desc(Post.id))
            .offset(offset)
            .limit(limit)
        )
        posts = list(result.scalars().unique().all())

        search_logger.info("Search completed", "SEARCH", search_type=search_type, keyword=processed,
                           result_count=total_count, elapsed_ms=round((time.time() - started) * 1000, 2))
        return posts, total_count
