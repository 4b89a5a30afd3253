from datetime import timedelta

from sqlalchemy import Column, DateTime, Enum, Integer, String

from board.core.config import settings
from board.db.base_class import Base, as_utc, utc_now
from board.models.enums import Role


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    nickname = Column(String(50), nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(Role, native_enum=False, length=20), nullable=False, default=Role.MEMBER)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    @property
    def is_moderator(self) -> bool:
        return self.role == Role.MODERATOR

    @property
    def is_dormant(self) -> bool:
        """No login for DORMANT_USER_DAYS. Users who never logged in are not dormant."""
        last_login = as_utc(self.last_login_at)
        if last_login is None:
            return False
        return last_login < utc_now() - timedelta(days=settings.DORMANT_USER_DAYS)

    @property
    def is_new_user(self) -> bool:
        created_at = as_utc(self.created_at)
        if created_at is None:
            return False
        return created_at > utc_now() - timedelta(days=settings.NEW_USER_DAYS)
