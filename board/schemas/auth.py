from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from board.models.enums import Role
from board.schemas.base import BaseSchema


class UserRegister(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    nickname: str = Field(..., min_length=1, max_length=50)


class UserResponse(BaseSchema):
    id: int
    username: str
    email: str
    nickname: str
    role: Role
    last_login_at: Optional[datetime] = None
    created_at: datetime


class Token(BaseModel):
    access_token: str
    token_type: str
    expires_in: int


class TokenPayload(BaseModel):
    sub: str
    exp: int


class UserLogin(BaseModel):
    username: str
    password: str
