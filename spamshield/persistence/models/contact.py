"""Contact model."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from spamshield.persistence.database import Base

if TYPE_CHECKING:
    from spamshield.persistence.models.user import User


class Contact(Base):
    """Address-book entry owned by a user.

    The same phone may appear in many users' address books, but at most
    once per owner.
    """

    __tablename__ = "contacts"
    __table_args__ = (
        UniqueConstraint("phone", "owner_id", name="uq_contacts_phone_owner"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False, index=True)
    spam = Column(Boolean, default=False, nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    owner = relationship("User", back_populates="contacts")

    def __repr__(self) -> str:
        return f"<Contact(id={self.id}, owner_id={self.owner_id}, phone={self.phone}, spam={self.spam})>"
