"""
Story schemas
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime
import uuid

from storybook.models.enums import StoryType
from storybook.schemas.common import sanitize_text


class PageIn(BaseModel):
    page_number: int = Field(..., ge=1)
    text: str = Field("", max_length=5000)
    original_image_id: Optional[str] = Field(None, max_length=255)
    transformed_image_id: Optional[str] = Field(None, max_length=255)
    character_ids: Optional[List[uuid.UUID]] = None


class PageAdd(BaseModel):
    """Page appended to the end of a story; its number is assigned by the server"""
    text: str = Field("", max_length=5000)
    original_image_id: Optional[str] = Field(None, max_length=255)
    transformed_image_id: Optional[str] = Field(None, max_length=255)
    character_ids: Optional[List[uuid.UUID]] = None


class StoryCreate(BaseModel):
    title: str = Field(..., max_length=200)
    description: Optional[str] = Field(None, max_length=3000)
    type: StoryType = StoryType.CUSTOM
    pages: List[PageIn] = Field(default_factory=list)

    @field_validator('title', 'description', mode='before')
    @classmethod
    def sanitize_fields(cls, v, info):
        return sanitize_text(v, {'title': 200, 'description': 3000}.get(info.field_name))


class PageOut(BaseModel):
    page_number: int
    text: str
    original_image_id: Optional[str] = None
    transformed_image_id: Optional[str] = None
    character_ids: Optional[List[uuid.UUID]] = None
    original_image_url: Optional[str] = None
    transformed_image_url: Optional[str] = None


class StoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    author_id: uuid.UUID
    title: str
    description: Optional[str] = None
    type: StoryType
    pages: List[PageOut] = Field(default_factory=list)
    is_published: bool = False
    created_at: datetime


class StoryListResponse(BaseModel):
    items: List[StoryResponse] = Field(default_factory=list)


class PremadePage(BaseModel):
    page_number: int
    text: str
    drawing_prompt: str


class PremadeStory(BaseModel):
    id: str
    title: str
    description: str
    pages: List[PremadePage]
    age_group: str
    category: str


class PrintResponse(BaseModel):
    print_url: str
    message: str
