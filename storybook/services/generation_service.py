"""
AI character image generation
"""

import asyncio
import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from storybook.core.access import assert_owner, get_or_404, require_caller
from storybook.core.config import settings
from storybook.core.errors import GenerationFailed, StorybookError
from storybook.core.security import CallerContext
from storybook.models.character import Character
from storybook.models.enums import CharacterStyle
from storybook.schemas.character import GenerationResult
from storybook.services.image_provider import ImageProvider
from storybook.services.storage import Storage, resolve_asset_url

logger = logging.getLogger(__name__)

STYLE_PROMPTS = {
    CharacterStyle.CARTOON.value: "cartoon style, animated, colorful, Disney-like",
    CharacterStyle.PHOTOREALISTIC.value: "photorealistic, detailed, high quality, professional photography",
    CharacterStyle.WATERCOLOR.value: "watercolor painting, soft colors, artistic, painted texture",
    CharacterStyle.DIGITAL_ART.value: "digital art, modern illustration, vibrant colors, clean lines",
    CharacterStyle.SKETCH.value: "pencil sketch, hand-drawn, artistic, black and white or light colors",
}

SUCCESS_MESSAGE = "Character image generated successfully! ✨"
FAILURE_MESSAGE = "Failed to generate character image. Please try again."


def style_description(style) -> str:
    """Prompt fragment for a style; unknown values fall back to cartoon."""
    key = style.value if isinstance(style, CharacterStyle) else str(style or "")
    return STYLE_PROMPTS.get(key, STYLE_PROMPTS[CharacterStyle.CARTOON.value])


def build_character_prompt(character: Character) -> str:
    return (
        f"Create a {style_description(character.style)} image of a character: {character.description}. "
        f"The character's name is {character.name}. "
        f"Make it suitable for children's storybooks, friendly and engaging."
    )


async def generate_character_image(
    db: AsyncSession,
    caller: CallerContext,
    character_id: uuid.UUID,
    *,
    provider: ImageProvider,
    storage: Storage,
) -> GenerationResult:
    """Generate a new image for a character and make it the displayed one.

    Missing character and foreign callers raise. Everything after that comes
    back as ``success=False`` with the character left as it was.
    """
    require_caller(caller)
    character = await get_or_404(db, Character, character_id, "character")
    assert_owner(caller, character.creator_id, "character")

    try:
        prompt = build_character_prompt(character)
        images = await provider.generate(
            prompt,
            n=1,
            size=settings.IMAGE_SIZE,
            quality=settings.IMAGE_QUALITY,
        )
        image_url = images[0].url if images else None
        if not image_url:
            raise GenerationFailed()

        downloaded = await provider.download(image_url)
        asset_id = await asyncio.to_thread(
            storage.store,
            downloaded.data,
            content_type=downloaded.content_type,
        )

        # last write wins when two generations race
        character.transformed_image_id = asset_id
        await db.commit()
    except (StorybookError, OSError) as e:
        await db.rollback()
        logger.warning(f"Character image generation failed (character={character_id}): {e}", exc_info=True)
        return GenerationResult(success=False, message=FAILURE_MESSAGE)
    except Exception as e:
        await db.rollback()
        logger.error(f"Unexpected error generating character image (character={character_id}): {e}", exc_info=True)
        return GenerationResult(success=False, message=FAILURE_MESSAGE)

    # already committed; fall back to the provider URL
    try:
        stored_url = await resolve_asset_url(storage, asset_id)
    except Exception as e:
        logger.warning(f"Could not resolve URL for generated asset {asset_id}: {e}")
        stored_url = None

    logger.info(f"Character image generated: character={character_id} asset={asset_id}")
    return GenerationResult(success=True, message=SUCCESS_MESSAGE, image_url=stored_url or image_url)
