"""
Scrapbook service
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import asyncio
import logging
import uuid

from storybook.core.access import get_or_404, is_owner, load_owned, require_caller
from storybook.core.errors import NotAuthorized, ValidationFailure
from storybook.core.security import CallerContext
from storybook.models.enums import ScrapbookLayout
from storybook.models.scrapbook import Scrapbook
from storybook.schemas.scrapbook import ScrapbookDetailResponse, ScrapbookImage
from storybook.services.print_service import PrintJobHandle, PrintService
from storybook.services.storage import Storage, resolve_asset_url

logger = logging.getLogger(__name__)


def _validated(title: str, image_ids: List[str], layout) -> tuple:
    title = (title or "").strip()
    if not title:
        raise ValidationFailure("Title is required")
    if not image_ids:
        raise ValidationFailure("Select at least one image")
    try:
        layout = ScrapbookLayout(layout)
    except ValueError:
        raise ValidationFailure(f"Unknown layout: {layout}")
    # order is the display order; duplicates are allowed
    return title, [str(i) for i in image_ids], layout.value


async def create_scrapbook(
    db: AsyncSession,
    caller: CallerContext,
    *,
    title: str,
    description: Optional[str],
    image_ids: List[str],
    layout: ScrapbookLayout = ScrapbookLayout.GRID,
) -> Scrapbook:
    creator_id = require_caller(caller)
    title, image_ids, layout = _validated(title, image_ids, layout)
    scrapbook = Scrapbook(
        creator_id=creator_id,
        title=title,
        description=description or None,
        image_ids=image_ids,
        layout=layout,
        is_published=False,
    )
    db.add(scrapbook)
    await db.commit()
    await db.refresh(scrapbook)
    logger.info(f"Scrapbook created: id={scrapbook.id} images={len(image_ids)}")
    return scrapbook


async def update_scrapbook(
    db: AsyncSession,
    caller: CallerContext,
    scrapbook_id: uuid.UUID,
    *,
    title: str,
    description: Optional[str],
    image_ids: List[str],
    layout: ScrapbookLayout,
) -> Scrapbook:
    """Replace title, description, images and layout. Nothing changes if validation fails."""
    scrapbook = await load_owned(db, caller, Scrapbook, scrapbook_id, "creator_id", "scrapbook")
    title, image_ids, layout = _validated(title, image_ids, layout)
    scrapbook.title = title
    scrapbook.description = description or None
    scrapbook.image_ids = image_ids
    scrapbook.layout = layout
    await db.commit()
    await db.refresh(scrapbook)
    return scrapbook


async def list_my_scrapbooks(db: AsyncSession, caller: CallerContext) -> List[Scrapbook]:
    if not caller.is_authenticated:
        return []
    result = await db.execute(
        select(Scrapbook)
        .where(Scrapbook.creator_id == caller.user_id)
        .order_by(Scrapbook.created_at.desc())
    )
    return list(result.scalars().all())


async def get_scrapbook(
    db: AsyncSession,
    caller: CallerContext,
    scrapbook_id: uuid.UUID,
    storage: Storage,
) -> ScrapbookDetailResponse:
    """Scrapbook with its images resolved, in stored order"""
    scrapbook = await get_or_404(db, Scrapbook, scrapbook_id, "scrapbook")
    if not scrapbook.is_published and not is_owner(caller, scrapbook.creator_id):
        raise NotAuthorized("You are not allowed to view this scrapbook")

    image_ids = list(scrapbook.image_ids or [])
    urls = await asyncio.gather(*[resolve_asset_url(storage, i) for i in image_ids])
    response = ScrapbookDetailResponse.model_validate(scrapbook)
    response.images = [ScrapbookImage(id=i, url=u) for i, u in zip(image_ids, urls)]
    return response


async def publish_scrapbook(db: AsyncSession, caller: CallerContext, scrapbook_id: uuid.UUID) -> Scrapbook:
    scrapbook = await load_owned(db, caller, Scrapbook, scrapbook_id, "creator_id", "scrapbook")
    if not scrapbook.is_published:
        scrapbook.is_published = True
        await db.commit()
        await db.refresh(scrapbook)
    return scrapbook


async def generate_print_url(
    db: AsyncSession,
    caller: CallerContext,
    scrapbook_id: uuid.UUID,
    printer: PrintService,
) -> PrintJobHandle:
    scrapbook = await load_owned(db, caller, Scrapbook, scrapbook_id, "creator_id", "scrapbook")
    return printer.submit_for_print(PrintService.SCRAPBOOK, scrapbook.id)
