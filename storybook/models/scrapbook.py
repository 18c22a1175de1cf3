"""
Scrapbook model
"""

from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
import uuid

from storybook.core.database import Base, UUID, JSON, utcnow
from storybook.models.enums import ScrapbookLayout


class Scrapbook(Base):
    """Ordered collection of asset ids; the list order is the display order"""
    __tablename__ = "scrapbooks"

    id = Column(UUID(), primary_key=True, default=uuid.uuid4, index=True)
    creator_id = Column(UUID(), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    image_ids = Column(JSON, nullable=False, default=list)
    layout = Column(String(16), nullable=False, default=ScrapbookLayout.GRID.value)
    is_published = Column(Boolean, default=False, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    creator = relationship("User", back_populates="scrapbooks")

    def __repr__(self):
        return f"<Scrapbook(id={self.id}, title={self.title})>"
