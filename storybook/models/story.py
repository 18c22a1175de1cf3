"""
Story model
"""

from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
import uuid

from storybook.core.database import Base, UUID, JSON, utcnow
from storybook.models.enums import StoryType


class Story(Base):
    """Illustrated story.

    ``pages`` is an ordered JSON list of
    ``{page_number, text, original_image_id, transformed_image_id, character_ids}``.
    """
    __tablename__ = "stories"

    id = Column(UUID(), primary_key=True, default=uuid.uuid4, index=True)
    author_id = Column(UUID(), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String(16), nullable=False, default=StoryType.CUSTOM.value, index=True)
    pages = Column(JSON, nullable=False, default=list)
    is_published = Column(Boolean, default=False, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    author = relationship("User", back_populates="stories")

    def __repr__(self):
        return f"<Story(id={self.id}, title={self.title}, author_id={self.author_id})>"
