"""
Character service
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional, Tuple
import asyncio
import logging
import uuid

from storybook.core.access import get_or_404, is_owner, load_owned, require_caller
from storybook.core.errors import NotAuthorized, NotFound, ValidationFailure
from storybook.core.security import CallerContext
from storybook.models.character import Character
from storybook.models.enums import CharacterStyle
from storybook.schemas.character import CharacterResponse, GenerationResult
from storybook.services.generation_service import generate_character_image
from storybook.services.image_provider import ImageProvider
from storybook.services.storage import Storage, resolve_asset_url

logger = logging.getLogger(__name__)


def _require_text(value: Optional[str], field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationFailure(f"{field} is required")
    return text


def _parse_style(style) -> CharacterStyle:
    try:
        return CharacterStyle(style)
    except ValueError:
        raise ValidationFailure(f"Unknown style: {style}")


async def to_response(storage: Storage, character: Character) -> CharacterResponse:
    """Character with both asset ids resolved to URLs"""
    original_url, transformed_url = await asyncio.gather(
        resolve_asset_url(storage, character.original_image_id),
        resolve_asset_url(storage, character.transformed_image_id),
    )
    response = CharacterResponse.model_validate(character)
    response.original_image_url = original_url
    response.transformed_image_url = transformed_url
    return response


async def create_character(
    db: AsyncSession,
    caller: CallerContext,
    *,
    name: str,
    description: str,
    style: CharacterStyle,
    original_image_id: Optional[str],
    storage: Storage,
) -> Character:
    """Create a character. An uploaded image is shown as-is until a generation replaces it."""
    creator_id = require_caller(caller)
    name = _require_text(name, "Name")
    description = _require_text(description, "Description")
    style = _parse_style(style)

    if original_image_id:
        exists = await asyncio.to_thread(storage.exists, original_image_id)
        if not exists:
            raise NotFound("Original image not found")

    character = Character(
        creator_id=creator_id,
        name=name,
        description=description,
        style=style.value,
        original_image_id=original_image_id or None,
        transformed_image_id=original_image_id or None,
        is_public=False,
    )
    db.add(character)
    await db.commit()
    await db.refresh(character)
    logger.info(f"Character created: id={character.id} creator={creator_id}")
    return character


async def create_character_and_generate(
    db: AsyncSession,
    caller: CallerContext,
    *,
    name: str,
    description: str,
    style: CharacterStyle,
    original_image_id: Optional[str],
    storage: Storage,
    provider: ImageProvider,
) -> Tuple[Character, Optional[GenerationResult]]:
    """Create, then run one generation attempt when no image was supplied."""
    character = await create_character(
        db,
        caller,
        name=name,
        description=description,
        style=style,
        original_image_id=original_image_id,
        storage=storage,
    )
    if character.original_image_id:
        return character, None

    generation = await generate_character_image(
        db, caller, character.id, provider=provider, storage=storage
    )
    await db.refresh(character)
    return character, generation


async def list_my_characters(db: AsyncSession, caller: CallerContext) -> List[Character]:
    """Caller's characters, newest first; empty for anonymous callers"""
    if not caller.is_authenticated:
        return []
    result = await db.execute(
        select(Character)
        .where(Character.creator_id == caller.user_id)
        .order_by(Character.created_at.desc())
    )
    return list(result.scalars().all())


async def list_public_characters(db: AsyncSession) -> List[Character]:
    result = await db.execute(
        select(Character)
        .where(Character.is_public == True)  # noqa: E712
        .order_by(Character.created_at.desc())
    )
    return list(result.scalars().all())


async def get_character(db: AsyncSession, caller: CallerContext, character_id: uuid.UUID) -> Character:
    """Readable by the creator, or by anyone once public"""
    character = await get_or_404(db, Character, character_id, "character")
    if not character.is_public and not is_owner(caller, character.creator_id):
        raise NotAuthorized("You are not allowed to view this character")
    return character


async def update_character(
    db: AsyncSession,
    caller: CallerContext,
    character_id: uuid.UUID,
    *,
    name: Optional[str] = None,
    description: Optional[str] = None,
    style: Optional[CharacterStyle] = None,
) -> Character:
    character = await load_owned(db, caller, Character, character_id, "creator_id", "character")

    # validate everything before touching the row
    changes = {}
    if name is not None:
        changes["name"] = _require_text(name, "Name")
    if description is not None:
        changes["description"] = _require_text(description, "Description")
    if style is not None:
        changes["style"] = _parse_style(style).value

    for key, value in changes.items():
        setattr(character, key, value)
    if changes:
        await db.commit()
        await db.refresh(character)
    return character


async def publish_character(db: AsyncSession, caller: CallerContext, character_id: uuid.UUID) -> Character:
    """Make a character public. Publishing twice is a no-op."""
    character = await load_owned(db, caller, Character, character_id, "creator_id", "character")
    if not character.is_public:
        character.is_public = True
        await db.commit()
        await db.refresh(character)
        logger.info(f"Character published: id={character_id}")
    return character
