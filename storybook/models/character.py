"""
Character model
"""

from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
import uuid

from storybook.core.database import Base, UUID, utcnow
from storybook.models.enums import CharacterStyle


class Character(Base):
    """A storybook character owned by its creator"""
    __tablename__ = "characters"

    id = Column(UUID(), primary_key=True, default=uuid.uuid4, index=True)
    creator_id = Column(UUID(), ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    # kept as free text: rows written before a style was retired must still load
    style = Column(String(32), nullable=False, default=CharacterStyle.CARTOON.value)

    # asset store ids (weak references, the blobs outlive the character)
    original_image_id = Column(String(255), nullable=True)
    transformed_image_id = Column(String(255), nullable=True)

    is_public = Column(Boolean, default=False, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    creator = relationship("User", back_populates="characters")

    def __repr__(self):
        return f"<Character(id={self.id}, name={self.name})>"
