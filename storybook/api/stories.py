"""
Story API router
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import asyncio
import uuid

from storybook.core.database import get_db
from storybook.core.security import CallerContext, get_caller_context
from storybook.schemas.story import (
    PageAdd,
    PremadeStory,
    PrintResponse,
    StoryCreate,
    StoryListResponse,
    StoryResponse,
)
from storybook.services import premade_catalog, story_service
from storybook.services.document_export import DOCX_MEDIA_TYPE
from storybook.services.print_service import PrintService, get_print_service
from storybook.services.storage import Storage, get_storage

router = APIRouter()


def _docx_response(filename: str, data: bytes) -> Response:
    return Response(
        content=data,
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("", response_model=StoryResponse, status_code=status.HTTP_201_CREATED)
async def create_story(
    payload: StoryCreate,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
    storage: Storage = Depends(get_storage),
):
    story = await story_service.create_story(
        db,
        caller,
        title=payload.title,
        description=payload.description,
        story_type=payload.type,
        pages=payload.pages,
    )
    return await story_service.to_response(storage, story)


@router.get("/my", response_model=StoryListResponse)
async def list_my_stories(
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
    storage: Storage = Depends(get_storage),
):
    stories = await story_service.list_my_stories(db, caller)
    return StoryListResponse(items=[await story_service.to_response(storage, s) for s in stories])


@router.get("/premade", response_model=List[PremadeStory])
async def list_premade_stories():
    """Built-in templates"""
    return premade_catalog.list_premade_stories()


@router.get("/premade/{premade_id}/document")
async def export_premade_document(premade_id: str):
    """Printable .docx template for a built-in story"""
    filename, data = await asyncio.to_thread(story_service.export_premade_document, premade_id)
    return _docx_response(filename, data)


@router.get("/{story_id}", response_model=StoryResponse)
async def get_story(
    story_id: uuid.UUID,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
    storage: Storage = Depends(get_storage),
):
    story = await story_service.get_story(db, caller, story_id)
    return await story_service.to_response(storage, story)


@router.get("/{story_id}/document")
async def export_story_document(
    story_id: uuid.UUID,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
):
    filename, data = await story_service.export_story_document(db, caller, story_id)
    return _docx_response(filename, data)


@router.post("/{story_id}/pages", response_model=StoryResponse)
async def add_page(
    story_id: uuid.UUID,
    payload: PageAdd,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
    storage: Storage = Depends(get_storage),
):
    story = await story_service.add_page(db, caller, story_id, payload)
    return await story_service.to_response(storage, story)


@router.delete("/{story_id}/pages/{page_number}", response_model=StoryResponse)
async def remove_page(
    story_id: uuid.UUID,
    page_number: int,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
    storage: Storage = Depends(get_storage),
):
    """Remove a page; the pages after it move up by one"""
    story = await story_service.remove_page(db, caller, story_id, page_number)
    return await story_service.to_response(storage, story)


@router.post("/{story_id}/publish", response_model=StoryResponse)
async def publish_story(
    story_id: uuid.UUID,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
    storage: Storage = Depends(get_storage),
):
    story = await story_service.publish_story(db, caller, story_id)
    return await story_service.to_response(storage, story)


@router.post("/{story_id}/print", response_model=PrintResponse)
async def print_story(
    story_id: uuid.UUID,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
    printer: PrintService = Depends(get_print_service),
):
    handle = await story_service.generate_print_url(db, caller, story_id, printer)
    return PrintResponse(print_url=handle.print_url, message=handle.message)
