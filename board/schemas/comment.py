from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from board.schemas.base import BaseSchema


class CommentCreate(BaseModel):
    content: str


class CommentUpdate(BaseModel):
    content: str


class CommentResponse(BaseSchema):
    id: int
    content: str
    post_id: int
    author_id: int
    author_username: Optional[str] = None
    parent_id: Optional[int] = None
    is_reply: bool
    like_count: int
    deleted: bool
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_comment(cls, comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            content=comment.content,
            post_id=comment.post_id,
            author_id=comment.author_id,
            author_username=comment.author.username if comment.author else None,
            parent_id=comment.parent_id,
            is_reply=comment.is_reply,
            like_count=comment.like_count,
            deleted=comment.deleted,
            deleted_at=comment.deleted_at,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


class CommentListResponse(BaseModel):
    comments: List[CommentResponse]
    total_count: int
