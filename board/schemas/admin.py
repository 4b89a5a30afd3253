from typing import List

from pydantic import BaseModel

from board.schemas.auth import UserResponse


class AdminStatsResponse(BaseModel):
    total_users: int
    total_posts: int
    active_posts: int
    deleted_posts: int
    total_comments: int
    active_comments: int
    deleted_comments: int


class UserListResponse(BaseModel):
    users: List[UserResponse]
    total_count: int
