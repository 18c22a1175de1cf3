"""
User model
"""

from sqlalchemy import Column, String, Boolean, DateTime, func
from sqlalchemy.orm import relationship
import uuid

from storybook.core.database import Base, UUID


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(UUID(), primary_key=True, default=uuid.uuid4, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(50), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    characters = relationship("Character", back_populates="creator")
    stories = relationship("Story", back_populates="author")
    scrapbooks = relationship("Scrapbook", back_populates="creator")

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, username={self.username})>"
