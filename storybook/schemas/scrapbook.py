"""
Scrapbook schemas
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime
import uuid

from storybook.models.enums import ScrapbookLayout
from storybook.schemas.common import sanitize_text


class ScrapbookBase(BaseModel):
    title: str = Field(..., max_length=200)
    description: Optional[str] = Field(None, max_length=3000)
    # display order; stored exactly as sent
    image_ids: List[str] = Field(default_factory=list)
    layout: ScrapbookLayout = ScrapbookLayout.GRID

    @field_validator('title', 'description', mode='before')
    @classmethod
    def sanitize_fields(cls, v, info):
        return sanitize_text(v, {'title': 200, 'description': 3000}.get(info.field_name))


class ScrapbookCreate(ScrapbookBase):
    pass


class ScrapbookUpdate(ScrapbookBase):
    pass


class ScrapbookImage(BaseModel):
    id: str
    url: Optional[str] = None


class ScrapbookResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    creator_id: uuid.UUID
    title: str
    description: Optional[str] = None
    image_ids: List[str] = Field(default_factory=list)
    layout: str
    is_published: bool = False
    created_at: datetime


class ScrapbookDetailResponse(ScrapbookResponse):
    images: List[ScrapbookImage] = Field(default_factory=list)


class ScrapbookListResponse(BaseModel):
    items: List[ScrapbookResponse] = Field(default_factory=list)
