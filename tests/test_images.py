import uuid

import pytest

from storybook.core.errors import NotFound, Unauthenticated, ValidationFailure
from storybook.core.security import create_access_token, create_upload_token, verify_token
from storybook.models.enums import CharacterStyle
from storybook.services import image_service
from storybook.services.storage import LocalStorage, is_valid_asset_id, new_asset_id


async def test_transform_is_identity(db, as_alice, storage):
    original = storage.seed()

    result = await image_service.transform_image(
        db, as_alice, original_image_id=original, style=CharacterStyle.SKETCH, storage=storage
    )

    assert result.success is True
    assert result.transformed_image_url == f"https://assets.test/{original}"
    assert result.message == "Demo: Transforming to sketch style! Real AI integration coming soon."

    items = await image_service.list_transformed_images(db, as_alice, storage)
    assert len(items) == 1
    assert items[0].original_image_id == items[0].transformed_image_id == original
    assert items[0].status == "completed"
    assert items[0].transformed_url == f"https://assets.test/{original}"


async def test_transform_missing_original(db, as_alice, storage):
    with pytest.raises(NotFound):
        await image_service.transform_image(
            db, as_alice, original_image_id=uuid.uuid4().hex, style=CharacterStyle.CARTOON, storage=storage
        )


async def test_transform_requires_caller(db, anonymous, storage):
    with pytest.raises(Unauthenticated):
        await image_service.transform_image(
            db, anonymous, original_image_id=storage.seed(), style=CharacterStyle.CARTOON, storage=storage
        )


async def test_transformed_list_is_per_user(db, as_alice, as_bob, anonymous, storage):
    await image_service.transform_image(
        db, as_alice, original_image_id=storage.seed(), style=CharacterStyle.CARTOON, storage=storage
    )
    assert await image_service.list_transformed_images(db, as_bob, storage) == []
    assert await image_service.list_transformed_images(db, anonymous, storage) == []


async def test_upload_channel_requires_caller(anonymous, storage):
    with pytest.raises(Unauthenticated):
        await image_service.create_upload_url(anonymous, storage)


async def test_upload_with_signed_token(as_alice, alice, storage):
    channel = await image_service.create_upload_url(as_alice, storage)
    token = channel.upload_url.rsplit("/", 1)[-1]

    asset_id = await image_service.store_upload(token, b"\x89PNG", "image/png", storage)

    assert is_valid_asset_id(asset_id)
    assert asset_id.endswith(".png")
    assert storage.blobs[asset_id] == b"\x89PNG"


async def test_upload_rejects_access_token(alice, storage):
    token = create_access_token(data={"sub": str(alice.id)})
    with pytest.raises(Unauthenticated):
        await image_service.store_upload(token, b"data", "image/png", storage)


async def test_upload_token_is_reusable_until_expiry(alice, storage):
    token = create_upload_token(alice.id)
    payload = verify_token(token, "upload")
    assert payload["sub"] == str(alice.id)
    assert set(payload) == {"sub", "exp", "type"}

    first = await image_service.store_upload(token, b"\x89PNG-1", "image/png", storage)
    second = await image_service.store_upload(token, b"\x89PNG-2", "image/png", storage)
    assert first != second
    assert storage.blobs[second] == b"\x89PNG-2"


async def test_upload_rejects_empty_and_non_image(alice, storage):
    token = create_upload_token(alice.id)
    with pytest.raises(ValidationFailure):
        await image_service.store_upload(token, b"", "image/png", storage)
    with pytest.raises(ValidationFailure):
        await image_service.store_upload(token, b"<html>", "text/html", storage)


async def test_get_image_url(storage):
    asset_id = storage.seed()
    assert await image_service.get_image_url(storage, asset_id) == f"https://assets.test/{asset_id}"
    assert await image_service.get_image_url(storage, uuid.uuid4().hex) is None
    assert await image_service.get_image_url(storage, "../etc/passwd") is None


def test_local_storage_round_trip(tmp_path):
    store = LocalStorage(str(tmp_path), public_base="http://localhost:8000/static/")

    asset_id = store.store(b"bytes", content_type="image/jpeg")

    assert asset_id.endswith(".jpg")
    assert (tmp_path / asset_id).read_bytes() == b"bytes"
    assert store.resolve_url(asset_id) == f"http://localhost:8000/static/{asset_id}"
    assert store.exists(asset_id)
    assert store.resolve_url(new_asset_id()) is None


def test_local_upload_channel_points_at_service(tmp_path):
    store = LocalStorage(str(tmp_path), upload_base="http://localhost:8000/images/upload")
    channel = store.create_upload_channel(upload_token="tok")
    assert channel.upload_url == "http://localhost:8000/images/upload/tok"
    assert channel.asset_id is None
