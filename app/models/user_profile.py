import uuid

from sqlalchemy import Column, DateTime, String, Text, UniqueConstraint, Uuid

from app.db.database import Base, utcnow


class UserProfile(Base):
    __tablename__ = "users_profile"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False)
    fullname = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String, nullable=True)
    identity_image_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", name="users_profile_unique_user_id"),
    )
