"""
Character schemas
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime
import uuid

from storybook.models.enums import CharacterStyle
from storybook.schemas.common import sanitize_text


class CharacterCreate(BaseModel):
    """Character creation request. Blank name/description are rejected by the service."""
    name: str = Field(..., max_length=100)
    description: str = Field(..., max_length=3000)
    style: CharacterStyle = CharacterStyle.CARTOON
    original_image_id: Optional[str] = Field(None, max_length=255)

    @field_validator('name', 'description', mode='before')
    @classmethod
    def sanitize_fields(cls, v, info):
        return sanitize_text(v, {'name': 100, 'description': 3000}.get(info.field_name))


class CharacterUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=3000)
    style: Optional[CharacterStyle] = None

    @field_validator('name', 'description', mode='before')
    @classmethod
    def sanitize_fields(cls, v, info):
        return sanitize_text(v, {'name': 100, 'description': 3000}.get(info.field_name))


class CharacterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    creator_id: uuid.UUID
    name: str
    description: str
    # raw stored value; may predate the current style list
    style: str
    original_image_id: Optional[str] = None
    transformed_image_id: Optional[str] = None
    original_image_url: Optional[str] = None
    transformed_image_url: Optional[str] = None
    is_public: bool = False
    created_at: datetime


class CharacterListResponse(BaseModel):
    items: List[CharacterResponse] = Field(default_factory=list)


class GenerationResult(BaseModel):
    """Outcome of an AI generation call. Upstream problems come back as success=False."""
    success: bool
    message: str
    image_url: Optional[str] = None


class CharacterCreateResponse(BaseModel):
    character: CharacterResponse
    # set only when the character was created without an image
    generation: Optional[GenerationResult] = None
