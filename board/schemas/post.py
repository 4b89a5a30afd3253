from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from board.schemas.base import BaseSchema


class PostCreate(BaseModel):
    """Schema for creating a post. Length and emptiness rules are enforced by the service."""
    title: str
    content: str
    category: Optional[str] = None


class PostUpdate(PostCreate):
    pass


class NoticeUpdate(BaseModel):
    is_notice: bool = Field(..., description="Pin the post as a notice")


class PostResponse(BaseSchema):
    id: int
    title: str
    content: str
    category: Optional[str] = None
    author_id: int
    author_username: Optional[str] = None
    view_count: int
    like_count: int
    is_notice: bool
    is_popular: bool
    deleted: bool
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_post(cls, post) -> "PostResponse":
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            category=post.category,
            author_id=post.author_id,
            author_username=post.author.username if post.author else None,
            view_count=post.view_count,
            like_count=post.like_count,
            is_notice=post.is_notice,
            is_popular=post.is_popular,
            deleted=post.deleted,
            deleted_at=post.deleted_at,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class PostListResponse(BaseModel):
    posts: List[PostResponse]
    total_count: int
