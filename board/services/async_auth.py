from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from board.core.config import settings
from board.core.exceptions import DuplicateResourceError, NotFoundError, ValidationError
from board.db.async_session import get_async_db
from board.db.base_class import utc_now
from board.models.enums import Role
from board.models.user import User
from board.schemas.auth import TokenPayload
from board.utils.logger import auth_logger

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_PREFIX}/auth/token")


class AsyncAuthService:
    """
    Identity service: registration, password checks, JWT issue and resolution.

    ``resolve_user`` is the one place a credential becomes a ``User``; every
    board operation receives that user explicitly.
    """

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a hash."""
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Hash a password for storage."""
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed.decode('utf-8')

    @staticmethod
    def validate_registration(username: str, email: str, password: str, nickname: str) -> None:
        if not username or not username.strip():
            raise ValidationError("Username is required")
        if len(username) > settings.USERNAME_MAX_LENGTH:
            raise ValidationError(f"Username cannot exceed {settings.USERNAME_MAX_LENGTH} characters")
        AsyncAuthService.validate_email(email)
        if not password or not password.strip():
            raise ValidationError("Password is required")
        if len(password) < settings.PASSWORD_MIN_LENGTH:
            raise ValidationError(f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters")
        AsyncAuthService.validate_nickname(nickname)

    @staticmethod
    def validate_email(email: str) -> None:
        if not email or not email.strip():
            raise ValidationError("Email is required")
        if len(email) > settings.EMAIL_MAX_LENGTH:
            raise ValidationError(f"Email cannot exceed {settings.EMAIL_MAX_LENGTH} characters")
        if "@" not in email or "." not in email:
            raise ValidationError("Invalid email format")

    @staticmethod
    def validate_nickname(nickname: str) -> None:
        if not nickname or not nickname.strip():
            raise ValidationError("Nickname is required")
        if len(nickname) > settings.NICKNAME_MAX_LENGTH:
            raise ValidationError(f"Nickname cannot exceed {settings.NICKNAME_MAX_LENGTH} characters")

    @classmethod
    async def register_user(
        cls,
        db: AsyncSession,
        username: str,
        email: str,
        password: str,
        nickname: str,
        role: Role = Role.MEMBER,
    ) -> User:
        """Create a user; username and email must both be unused."""
        cls.validate_registration(username, email, password, nickname)

        if await cls.get_user_by_username(db, username) is not None:
            raise DuplicateResourceError(f"Username already exists: {username}")
        if await cls.get_user_by_email(db, email) is not None:
            raise DuplicateResourceError(f"Email already exists: {email}")

        user = User(
            username=username,
            email=email,
            nickname=nickname,
            hashed_password=cls.get_password_hash(password),
            role=role,
        )
        db.add(user)
        await db.commit()

        auth_logger.success("User registered", "REGISTER", user_id=user.id, username=username)
        return user

    @classmethod
    async def authenticate_user(cls, db: AsyncSession, username: str, password: str) -> Optional[User]:
        """Return the user when the password matches, otherwise None."""
        user = await cls.get_user_by_username(db, username)
        if user is None or not cls.verify_password(password, user.hashed_password):
            auth_logger.warning("Authentication failed", "LOGIN", username=username)
            return None
        return user

    @classmethod
    async def update_last_login(cls, db: AsyncSession, user: User) -> None:
        """Stamp the login time on the user."""
        now = utc_now()
        user.last_login_at = now
        user.updated_at = now
        await db.commit()

    @classmethod
    async def ensure_bootstrap_moderator(cls, db: AsyncSession) -> User:
        """Create the configured moderator account unless the username already exists."""
        existing = await cls.get_user_by_username(db, settings.BOOTSTRAP_MODERATOR_USERNAME)
        if existing is not None:
            auth_logger.info("Bootstrap moderator already exists", "BOOTSTRAP",
                             username=existing.username)
            return existing

        moderator = await cls.register_user(
            db,
            username=settings.BOOTSTRAP_MODERATOR_USERNAME,
            email=settings.BOOTSTRAP_MODERATOR_EMAIL,
            password=settings.BOOTSTRAP_MODERATOR_PASSWORD,
            nickname=settings.BOOTSTRAP_MODERATOR_NICKNAME,
            role=Role.MODERATOR,
        )
        auth_logger.success("Bootstrap moderator created", "BOOTSTRAP", username=moderator.username)
        return moderator

    @classmethod
    def create_access_token(cls, user_id: int, expires_delta: timedelta = None) -> str:
        """Create a new JWT access token."""
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        expire = datetime.now(timezone.utc) + expires_delta
        to_encode = {"sub": str(user_id), "exp": expire}

        return jwt.encode(
            to_encode,
            settings.SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )

    @classmethod
    async def get_user_by_username(cls, db: AsyncSession, username: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    @classmethod
    async def get_user_by_email(cls, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @classmethod
    async def get_user_by_id(cls, db: AsyncSession, user_id: int) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @classmethod
    async def require_user_by_username(cls, db: AsyncSession, username: str) -> User:
        user = await cls.get_user_by_username(db, username)
        if user is None:
            raise NotFoundError(f"User not found: {username}")
        return user

    @classmethod
    async def resolve_user(cls, db: AsyncSession, token: str) -> User:
        """Turn a bearer token into the acting user."""
        credentials_exception = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

        try:
            payload = jwt.decode(
                token,
                settings.SECRET_KEY,
                algorithms=[settings.JWT_ALGORITHM],
            )
            token_data = TokenPayload(**payload)
            user_id = int(token_data.sub)
        except (jwt.PyJWTError, ValueError):
            raise credentials_exception

        user = await cls.get_user_by_id(db, user_id)
        if user is None:
            raise credentials_exception

        return user


async def get_current_user(
    db: AsyncSession = Depends(get_async_db),
    token: str = Depends(oauth2_scheme)
) -> User:
    """FastAPI dependency resolving the bearer token to the acting user."""
    return await AsyncAuthService.resolve_user(db, token)
