"""User model definitions."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import validates

from videohub.auth import passwords
from videohub.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Represents a registered channel owner."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, index=True, nullable=False)
    avatar = Column(String, nullable=False)
    cover_image = Column(String, default="")
    password = Column(String, nullable=False)  # bcrypt hash
    refresh_token = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    @validates("username", "email")
    def normalize_identity(self, key: str, value: str) -> str:
        return value.strip().lower()

    @validates("full_name")
    def normalize_full_name(self, key: str, value: str) -> str:
        return value.strip()

    @validates("avatar")
    def validate_avatar(self, key: str, value: str) -> str:
        if not value:
            raise ValueError("Avatar URL is required.")
        return value

    def is_password_correct(self, password: str | None) -> bool:
        return passwords.verify_password(password or "", self.password)
