from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr

from board.models.enums import Role


class UserProfileResponse(BaseModel):
    username: str
    nickname: str
    email: str
    role: Role
    created_at: datetime
    last_login_at: Optional[datetime] = None
    is_dormant: bool
    is_new_user: bool


class UserProfileUpdate(BaseModel):
    nickname: str
    email: EmailStr


class UserStatsResponse(BaseModel):
    username: str
    post_count: int
    comment_count: int
    total_activity_count: int


class RoleChange(BaseModel):
    role: Role
