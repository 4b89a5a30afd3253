from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from board.db.base_class import Base, utc_now


class Comment(Base):
    __tablename__ = "comments"
    __table_args__ = (
        CheckConstraint("like_count >= 0", name="ck_comments_like_count_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    content = Column(Text, nullable=False)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, index=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # A non-null parent marks a reply. Parents are always top-level comments.
    parent_id = Column(Integer, ForeignKey("comments.id"), nullable=True, index=True)
    like_count = Column(Integer, nullable=False, default=0)
    deleted = Column(Boolean, nullable=False, default=False, index=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    author = relationship("User", lazy="joined", innerjoin=True)

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None

    @property
    def depth(self) -> int:
        return 1 if self.is_reply else 0

    @property
    def can_reply(self) -> bool:
        return not self.is_reply

    def is_author(self, user) -> bool:
        return self.author_id == user.id

    def can_modify(self, user) -> bool:
        return self.is_author(user) or user.is_moderator

    def soft_delete(self):
        now = utc_now()
        self.deleted = True
        self.deleted_at = now
        self.updated_at = now

    def restore(self):
        self.deleted = False
        self.deleted_at = None
        self.updated_at = utc_now()
