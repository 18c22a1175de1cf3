"""
Character API router
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from storybook.core.database import get_db
from storybook.core.security import CallerContext, get_caller_context
from storybook.schemas.character import (
    CharacterCreate,
    CharacterCreateResponse,
    CharacterListResponse,
    CharacterResponse,
    CharacterUpdate,
    GenerationResult,
)
from storybook.services import character_service
from storybook.services.generation_service import generate_character_image
from storybook.services.image_provider import ImageProvider, get_image_provider
from storybook.services.storage import Storage, get_storage

router = APIRouter()


@router.post("", response_model=CharacterCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_character(
    payload: CharacterCreate,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
    storage: Storage = Depends(get_storage),
    provider: ImageProvider = Depends(get_image_provider),
):
    """Create a character. Without an uploaded image one AI generation is attempted."""
    character, generation = await character_service.create_character_and_generate(
        db,
        caller,
        name=payload.name,
        description=payload.description,
        style=payload.style,
        original_image_id=payload.original_image_id,
        storage=storage,
        provider=provider,
    )
    return CharacterCreateResponse(
        character=await character_service.to_response(storage, character),
        generation=generation,
    )


@router.get("/my", response_model=CharacterListResponse)
async def list_my_characters(
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
    storage: Storage = Depends(get_storage),
):
    characters = await character_service.list_my_characters(db, caller)
    return CharacterListResponse(items=[await character_service.to_response(storage, c) for c in characters])


@router.get("/public", response_model=CharacterListResponse)
async def list_public_characters(
    db: AsyncSession = Depends(get_db),
    storage: Storage = Depends(get_storage),
):
    characters = await character_service.list_public_characters(db)
    return CharacterListResponse(items=[await character_service.to_response(storage, c) for c in characters])


@router.get("/{character_id}", response_model=CharacterResponse)
async def get_character(
    character_id: uuid.UUID,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
    storage: Storage = Depends(get_storage),
):
    character = await character_service.get_character(db, caller, character_id)
    return await character_service.to_response(storage, character)


@router.patch("/{character_id}", response_model=CharacterResponse)
async def update_character(
    character_id: uuid.UUID,
    payload: CharacterUpdate,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
    storage: Storage = Depends(get_storage),
):
    character = await character_service.update_character(
        db,
        caller,
        character_id,
        name=payload.name,
        description=payload.description,
        style=payload.style,
    )
    return await character_service.to_response(storage, character)


@router.post("/{character_id}/publish", response_model=CharacterResponse)
async def publish_character(
    character_id: uuid.UUID,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
    storage: Storage = Depends(get_storage),
):
    character = await character_service.publish_character(db, caller, character_id)
    return await character_service.to_response(storage, character)


@router.post("/{character_id}/generate-image", response_model=GenerationResult)
async def generate_image(
    character_id: uuid.UUID,
    caller: CallerContext = Depends(get_caller_context),
    db: AsyncSession = Depends(get_db),
    storage: Storage = Depends(get_storage),
    provider: ImageProvider = Depends(get_image_provider),
):
    """Regenerate the character's image. Provider failures come back as success=false."""
    return await generate_character_image(db, caller, character_id, provider=provider, storage=storage)
