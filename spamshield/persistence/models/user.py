"""User model."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from spamshield.persistence.database import Base

if TYPE_CHECKING:
    from spamshield.persistence.models.contact import Contact


class User(Base):
    """Registered user; identified by phone, optionally by email."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    phone = Column(String(50), unique=True, nullable=False, index=True)
    # NULLs never collide, so the constraint only applies when an email is set
    email = Column(String(255), unique=True, nullable=True, index=True)
    hashed_password = Column(String(255), nullable=False)
    refresh_token = Column(Text, nullable=True)
    spam = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    contacts = relationship("Contact", back_populates="owner")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, phone={self.phone}, email={self.email})>"
