import uuid

from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.db.database import Base, utcnow


class UserBadge(Base):
    """One grant of a badge to a directory user."""

    __tablename__ = "users_badge"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # References the directory's user id; no local foreign key.
    user_id = Column(Uuid, nullable=False, index=True)
    badge_id = Column(Uuid, ForeignKey("badges.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    badge = relationship("Badge", back_populates="grants")

    __table_args__ = (
        UniqueConstraint("user_id", "badge_id", name="users_badge_unique_user_badge"),
    )
