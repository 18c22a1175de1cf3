"""
Scrapbook API router
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from storybook.core.database import get_db
from storybook.core.security import CallerContext, get_caller_context
from storybook.schemas.scrapbook import (
    ScrapbookCreate,
    ScrapbookDetailResponse,
    ScrapbookListResponse,
    ScrapbookResponse,
    ScrapbookUpdate,
)
from storybook.schemas.story import PrintResponse
from storybook.services import scrapbook_service
from storybook.services.print_service import PrintService, get_print_service
from storybook.services.storage import Storage, get_storage

router = APIRouter()


@router.post("", response_model=ScrapbookResponse, status_code=status.HTTP_201_CREATED)
async def create_scrapbook(
    payload: ScrapbookCreate,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
):
    return await scrapbook_service.create_scrapbook(
        db,
        caller,
        title=payload.title,
        description=payload.description,
        image_ids=payload.image_ids,
        layout=payload.layout,
    )


@router.get("/my", response_model=ScrapbookListResponse)
async def list_my_scrapbooks(
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
):
    scrapbooks = await scrapbook_service.list_my_scrapbooks(db, caller)
    return ScrapbookListResponse(items=[ScrapbookResponse.model_validate(s) for s in scrapbooks])


@router.get("/{scrapbook_id}", response_model=ScrapbookDetailResponse)
async def get_scrapbook(
    scrapbook_id: uuid.UUID,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
    storage: Storage = Depends(get_storage),
):
    return await scrapbook_service.get_scrapbook(db, caller, scrapbook_id, storage)


@router.put("/{scrapbook_id}", response_model=ScrapbookResponse)
async def update_scrapbook(
    scrapbook_id: uuid.UUID,
    payload: ScrapbookUpdate,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
):
    return await scrapbook_service.update_scrapbook(
        db,
        caller,
        scrapbook_id,
        title=payload.title,
        description=payload.description,
        image_ids=payload.image_ids,
        layout=payload.layout,
    )


@router.post("/{scrapbook_id}/publish", response_model=ScrapbookResponse)
async def publish_scrapbook(
    scrapbook_id: uuid.UUID,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
):
    return await scrapbook_service.publish_scrapbook(db, caller, scrapbook_id)


@router.post("/{scrapbook_id}/print", response_model=PrintResponse)
async def print_scrapbook(
    scrapbook_id: uuid.UUID,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
    printer: PrintService = Depends(get_print_service),
):
    handle = await scrapbook_service.generate_print_url(db, caller, scrapbook_id, printer)
    return PrintResponse(print_url=handle.print_url, message=handle.message)
