"""
Story service
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, Iterable, List, Optional, Tuple
import asyncio
import logging
import uuid

from storybook.core.access import get_or_404, is_owner, load_owned, require_caller
from storybook.core.errors import NotAuthorized, NotFound, ValidationFailure
from storybook.core.security import CallerContext
from storybook.models.enums import StoryType
from storybook.models.story import Story
from storybook.schemas.story import PageOut, StoryResponse
from storybook.services import document_export, premade_catalog
from storybook.services.print_service import PrintJobHandle, PrintService
from storybook.services.storage import Storage, resolve_asset_url

logger = logging.getLogger(__name__)


def _field(page: Any, name: str):
    if isinstance(page, dict):
        return page.get(name)
    return getattr(page, name, None)


def page_record(page: Any, page_number: Optional[int] = None) -> Dict[str, Any]:
    """JSON-safe page dict from a PageIn/PageAdd or an existing dict"""
    character_ids = _field(page, "character_ids")
    return {
        "page_number": int(page_number if page_number is not None else _field(page, "page_number")),
        "text": _field(page, "text") or "",
        "original_image_id": _field(page, "original_image_id"),
        "transformed_image_id": _field(page, "transformed_image_id"),
        "character_ids": [str(c) for c in character_ids] if character_ids is not None else None,
    }


def renumber_pages(pages: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Copy of pages numbered 1..n in their current order"""
    return [dict(page, page_number=i) for i, page in enumerate(pages, start=1)]


def remove_page_at(pages: List[Dict[str, Any]], page_number: int) -> List[Dict[str, Any]]:
    """Drop one page and close the gap. The input list is not modified."""
    index = next((i for i, p in enumerate(pages) if int(p.get("page_number", 0)) == page_number), None)
    if index is None:
        raise NotFound(f"Page {page_number} not found")
    if len(pages) <= 1:
        raise ValidationFailure("A story must keep at least one page")
    return renumber_pages(pages[:index] + pages[index + 1:])


async def to_response(storage: Storage, story: Story) -> StoryResponse:
    """Story with each page's image ids resolved to URLs"""
    pages = list(story.pages or [])
    urls = await asyncio.gather(*[
        asyncio.gather(
            resolve_asset_url(storage, p.get("original_image_id")),
            resolve_asset_url(storage, p.get("transformed_image_id")),
        )
        for p in pages
    ])
    page_out = [
        PageOut(**page_record(p), original_image_url=original_url, transformed_image_url=transformed_url)
        for p, (original_url, transformed_url) in zip(pages, urls)
    ]
    return StoryResponse(
        id=story.id,
        author_id=story.author_id,
        title=story.title,
        description=story.description,
        type=story.type,
        pages=page_out,
        is_published=story.is_published,
        created_at=story.created_at,
    )


async def create_story(
    db: AsyncSession,
    caller: CallerContext,
    *,
    title: str,
    description: Optional[str] = None,
    story_type: StoryType = StoryType.CUSTOM,
    pages: Iterable[Any] = (),
) -> Story:
    """Create a draft story. Pages are kept in the order given; numbering is not checked."""
    author_id = require_caller(caller)
    title = (title or "").strip()
    if not title:
        raise ValidationFailure("Title is required")

    story = Story(
        author_id=author_id,
        title=title,
        description=description or None,
        type=StoryType(story_type).value,
        pages=[page_record(p) for p in pages],
        is_published=False,
    )
    db.add(story)
    await db.commit()
    await db.refresh(story)
    logger.info(f"Story created: id={story.id} author={author_id} pages={len(story.pages)}")
    return story


async def list_my_stories(db: AsyncSession, caller: CallerContext) -> List[Story]:
    """Caller's stories, newest first; empty for anonymous callers"""
    if not caller.is_authenticated:
        return []
    result = await db.execute(
        select(Story)
        .where(Story.author_id == caller.user_id)
        .order_by(Story.created_at.desc())
    )
    return list(result.scalars().all())


async def get_story(db: AsyncSession, caller: CallerContext, story_id: uuid.UUID) -> Story:
    """Readable by the author, or by anyone once published"""
    story = await get_or_404(db, Story, story_id, "story")
    if not story.is_published and not is_owner(caller, story.author_id):
        raise NotAuthorized("You are not allowed to view this story")
    return story


async def add_page(db: AsyncSession, caller: CallerContext, story_id: uuid.UUID, page: Any) -> Story:
    story = await load_owned(db, caller, Story, story_id, "author_id", "story")
    pages = list(story.pages or [])
    # JSON column: assign a new list so the change is tracked
    story.pages = pages + [page_record(page, page_number=len(pages) + 1)]
    await db.commit()
    await db.refresh(story)
    return story


async def remove_page(db: AsyncSession, caller: CallerContext, story_id: uuid.UUID, page_number: int) -> Story:
    story = await load_owned(db, caller, Story, story_id, "author_id", "story")
    story.pages = remove_page_at(list(story.pages or []), page_number)
    await db.commit()
    await db.refresh(story)
    return story


async def publish_story(db: AsyncSession, caller: CallerContext, story_id: uuid.UUID) -> Story:
    """Publishing twice is a no-op"""
    story = await load_owned(db, caller, Story, story_id, "author_id", "story")
    if not story.is_published:
        story.is_published = True
        await db.commit()
        await db.refresh(story)
        logger.info(f"Story published: id={story_id}")
    return story


async def generate_print_url(
    db: AsyncSession,
    caller: CallerContext,
    story_id: uuid.UUID,
    printer: PrintService,
) -> PrintJobHandle:
    story = await load_owned(db, caller, Story, story_id, "author_id", "story")
    return printer.submit_for_print(PrintService.STORY, story.id)


def export_premade_document(premade_id: str) -> Tuple[str, bytes]:
    story = premade_catalog.get_premade_story(premade_id)
    if story is None:
        raise NotFound("Story not found")
    export = document_export.ExportStory.from_premade(story)
    return document_export.document_filename(export.title), document_export.render_story_document(export)


async def export_story_document(db: AsyncSession, caller: CallerContext, story_id: uuid.UUID) -> Tuple[str, bytes]:
    """Render one of the caller's own stories as a printable template"""
    story = await load_owned(db, caller, Story, story_id, "author_id", "story")
    export = document_export.ExportStory.from_story(story)
    data = await asyncio.to_thread(document_export.render_story_document, export)
    return document_export.document_filename(export.title), data
