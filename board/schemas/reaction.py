from typing import Literal, Optional

from pydantic import BaseModel


class VoteRequest(BaseModel):
    up: bool


class VoteStatusResponse(BaseModel):
    post_id: int
    vote: Optional[Literal["up", "down"]] = None
    like_count: int
    upvote_count: int
    downvote_count: int


class LikeToggleResponse(BaseModel):
    comment_id: int
    result: Literal["liked", "unliked"]
    like_count: int
