"""
Image API router: uploads, asset URLs, style transformation
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from storybook.core.config import settings
from storybook.core.database import get_db
from storybook.core.errors import ValidationFailure
from storybook.core.security import CallerContext, get_caller_context
from storybook.schemas.image import (
    ImageUrlResponse,
    TransformedImageListResponse,
    TransformRequest,
    TransformResponse,
    UploadResult,
    UploadUrlResponse,
)
from storybook.services import image_service
from storybook.services.storage import Storage, get_storage

router = APIRouter()


@router.post("/upload-url", response_model=UploadUrlResponse)
async def create_upload_url(
    caller: CallerContext = Depends(get_caller_context),
    storage: Storage = Depends(get_storage),
):
    """Short-lived URL the client sends image bytes to"""
    return await image_service.create_upload_url(caller, storage)


@router.api_route("/upload/{token}", methods=["POST", "PUT"], response_model=UploadResult)
async def upload_image(
    token: str,
    request: Request,
    storage: Storage = Depends(get_storage),
):
    """Raw request body is the image; answers with its storageId"""
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > settings.MAX_UPLOAD_BYTES:
        raise ValidationFailure(f"Upload exceeds {settings.MAX_UPLOAD_BYTES} bytes")
    # chunked bodies carry no content-length
    body = bytearray()
    async for chunk in request.stream():
        body += chunk
        if len(body) > settings.MAX_UPLOAD_BYTES:
            raise ValidationFailure(f"Upload exceeds {settings.MAX_UPLOAD_BYTES} bytes")
    data = bytes(body)
    asset_id = await image_service.store_upload(token, data, request.headers.get("content-type"), storage)
    return UploadResult(storageId=asset_id)


@router.post("/transform", response_model=TransformResponse)
async def transform_image(
    payload: TransformRequest,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
    storage: Storage = Depends(get_storage),
):
    return await image_service.transform_image(
        db,
        caller,
        original_image_id=payload.original_image_id,
        style=payload.style,
        storage=storage,
    )


@router.get("/transformed", response_model=TransformedImageListResponse)
async def list_transformed_images(
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
    storage: Storage = Depends(get_storage),
):
    items = await image_service.list_transformed_images(db, caller, storage)
    return TransformedImageListResponse(items=items)


@router.get("/{asset_id}/url", response_model=ImageUrlResponse)
async def get_image_url(asset_id: str, storage: Storage = Depends(get_storage)):
    return ImageUrlResponse(asset_id=asset_id, url=await image_service.get_image_url(storage, asset_id))
