"""
Image / asset schemas
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Dict, List
from datetime import datetime
import uuid

from storybook.models.enums import CharacterStyle


class UploadUrlResponse(BaseModel):
    """Where the client should send the raw image bytes"""
    upload_url: str
    method: str = "POST"
    # presigned POST form fields (S3 only)
    fields: Dict[str, str] = Field(default_factory=dict)
    # known up front for S3; local uploads return it as storageId
    asset_id: Optional[str] = None


class UploadResult(BaseModel):
    storageId: str


class TransformRequest(BaseModel):
    original_image_id: str = Field(..., min_length=1, max_length=255)
    style: CharacterStyle


class TransformResponse(BaseModel):
    success: bool
    transformed_image_url: Optional[str] = None
    message: str


class TransformedImageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    original_image_id: str
    transformed_image_id: str
    style: str
    status: str
    original_url: Optional[str] = None
    transformed_url: Optional[str] = None
    created_at: datetime


class TransformedImageListResponse(BaseModel):
    items: List[TransformedImageResponse] = Field(default_factory=list)


class ImageUrlResponse(BaseModel):
    asset_id: str
    url: Optional[str] = None
