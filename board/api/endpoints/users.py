from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from board.api.deps import get_async_db, get_current_user
from board.models.user import User
from board.schemas.comment import CommentListResponse, CommentResponse
from board.schemas.post import PostListResponse, PostResponse
from board.schemas.user import UserProfileResponse, UserProfileUpdate, UserStatsResponse
from board.services.async_user_profile import AsyncUserProfileService

router = APIRouter()


@router.put("/me", response_model=UserProfileResponse)
async def update_my_profile(
    profile: UserProfileUpdate,
    db: AsyncSession = Depends(get_async_db),
    current_user: User = Depends(get_current_user)
):
    user = await AsyncUserProfileService.update_profile(db, current_user, profile.nickname, profile.email)
    return await AsyncUserProfileService.get_user_profile(db, user.username)


@router.get("/{username}", response_model=UserProfileResponse)
async def get_profile(username: str, db: AsyncSession = Depends(get_async_db)):
    return await AsyncUserProfileService.get_user_profile(db, username)


@router.get("/{username}/stats", response_model=UserStatsResponse)
async def get_stats(username: str, db: AsyncSession = Depends(get_async_db)):
    return await AsyncUserProfileService.get_user_stats(db, username)


@router.get("/{username}/posts", response_model=PostListResponse)
async def get_user_posts(
    username: str,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_async_db)
):
    posts, total_count = await AsyncUserProfileService.get_user_posts(db, username, limit=limit, offset=offset)
    return PostListResponse(posts=[PostResponse.from_post(p) for p in posts], total_count=total_count)


@router.get("/{username}/comments", response_model=CommentListResponse)
async def get_user_comments(
    username: str,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_async_db)
):
    comments, total_count = await AsyncUserProfileService.get_user_comments(
        db, username, limit=limit, offset=offset
    )
    return CommentListResponse(
        comments=[CommentResponse.from_comment(c) for c in comments], total_count=total_count
    )
