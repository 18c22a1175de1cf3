from sqlalchemy import Column, String, DateTime, ForeignKey
import uuid

from storybook.core.database import Base, UUID, utcnow
from storybook.models.enums import TransformationStatus


class ImageTransformation(Base):
    __tablename__ = "image_transformations"

    id = Column(UUID(), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(), ForeignKey("users.id"), nullable=False, index=True)

    original_image_id = Column(String(255), nullable=False)
    transformed_image_id = Column(String(255), nullable=False)
    style = Column(String(32), nullable=False)
    status = Column(String(16), default=TransformationStatus.PROCESSING.value, nullable=False, index=True)  # processing|completed|failed

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
