"""
Uploads, asset URLs and the style transformation stub
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import asyncio
import logging

from storybook.core.access import require_caller
from storybook.core.config import settings
from storybook.core.errors import NotFound, Unauthenticated, ValidationFailure
from storybook.core.security import CallerContext, create_upload_token, verify_token
from storybook.models.enums import CharacterStyle, TransformationStatus
from storybook.models.image_transformation import ImageTransformation
from storybook.schemas.image import TransformedImageResponse, TransformResponse, UploadUrlResponse
from storybook.services.storage import Storage, resolve_asset_url

logger = logging.getLogger(__name__)


async def create_upload_url(caller: CallerContext, storage: Storage) -> UploadUrlResponse:
    user_id = require_caller(caller)
    token = create_upload_token(user_id)
    channel = await asyncio.to_thread(storage.create_upload_channel, upload_token=token)
    return UploadUrlResponse(
        upload_url=channel.upload_url,
        method=channel.method,
        fields=channel.fields,
        asset_id=channel.asset_id,
    )


async def store_upload(token: str, data: bytes, content_type: Optional[str], storage: Storage) -> str:
    """Accept bytes posted to a local upload URL. Returns the new asset id."""
    payload = verify_token(token, "upload")
    if payload is None:
        raise Unauthenticated("Upload link is invalid or expired")
    if not data:
        raise ValidationFailure("Empty upload")
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise ValidationFailure(f"Upload exceeds {settings.MAX_UPLOAD_BYTES} bytes")
    if content_type and not content_type.lower().startswith("image/"):
        raise ValidationFailure("Only image uploads are accepted")

    asset_id = await asyncio.to_thread(storage.store, data, content_type=content_type)
    logger.info(f"Upload stored: asset={asset_id} user={payload.get('sub')} bytes={len(data)}")
    return asset_id


async def get_image_url(storage: Storage, asset_id: str) -> Optional[str]:
    return await resolve_asset_url(storage, asset_id)


async def transform_image(
    db: AsyncSession,
    caller: CallerContext,
    *,
    original_image_id: str,
    style: CharacterStyle,
    storage: Storage,
) -> TransformResponse:
    """Record a transformation of an uploaded image.

    No style transfer happens yet: the "transformed" image is the original.
    """
    user_id = require_caller(caller)
    original_url = await resolve_asset_url(storage, original_image_id)
    if original_url is None:
        raise NotFound("Original image not found")

    style_value = CharacterStyle(style).value
    transformation = ImageTransformation(
        user_id=user_id,
        original_image_id=original_image_id,
        transformed_image_id=original_image_id,
        style=style_value,
        status=TransformationStatus.COMPLETED.value,
    )
    db.add(transformation)
    await db.commit()

    return TransformResponse(
        success=True,
        transformed_image_url=original_url,
        message=f"Demo: Transforming to {style_value} style! Real AI integration coming soon.",
    )


async def list_transformed_images(
    db: AsyncSession,
    caller: CallerContext,
    storage: Storage,
) -> List[TransformedImageResponse]:
    """Caller's completed transformations, newest first"""
    if not caller.is_authenticated:
        return []
    result = await db.execute(
        select(ImageTransformation)
        .where(
            ImageTransformation.user_id == caller.user_id,
            ImageTransformation.status == TransformationStatus.COMPLETED.value,
        )
        .order_by(ImageTransformation.created_at.desc())
    )
    items = []
    for row in result.scalars().all():
        original_url, transformed_url = await asyncio.gather(
            resolve_asset_url(storage, row.original_image_id),
            resolve_asset_url(storage, row.transformed_image_id),
        )
        item = TransformedImageResponse.model_validate(row)
        item.original_url = original_url
        item.transformed_url = transformed_url
        items.append(item)
    return items
