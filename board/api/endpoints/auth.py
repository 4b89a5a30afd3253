from typing import Any

from fastapi import APIRouter, Depends, Form, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from board.api.deps import get_async_db, get_current_user
from board.core.config import settings
from board.models.user import User
from board.schemas.auth import Token, UserLogin, UserRegister, UserResponse
from board.services.async_auth import AsyncAuthService

router = APIRouter()


async def _issue_token(db: AsyncSession, username: str, password: str) -> Token:
    user = await AsyncAuthService.authenticate_user(db, username, password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    await AsyncAuthService.update_last_login(db, user)

    return Token(
        access_token=AsyncAuthService.create_access_token(user.id),
        token_type="bearer",
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserRegister, db: AsyncSession = Depends(get_async_db)) -> Any:
    """Create a member account."""
    user = await AsyncAuthService.register_user(
        db,
        username=user_data.username,
        email=user_data.email,
        password=user_data.password,
        nickname=user_data.nickname,
    )
    return user


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin, db: AsyncSession = Depends(get_async_db)) -> Any:
    """Log in with a JSON body and receive a bearer token."""
    return await _issue_token(db, credentials.username, credentials.password)


@router.post("/token", response_model=Token)
async def login_for_access_token(
    username: str = Form(...),
    password: str = Form(...),
    db: AsyncSession = Depends(get_async_db)
) -> Any:
    """
    OAuth2 compatible token login, get an access token for future requests.
    This endpoint is primarily for Swagger UI authentication.
    """
    return await _issue_token(db, username, password)


@router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: User = Depends(get_current_user)) -> Any:
    return current_user
