import pytest

from storybook.core.errors import NotAuthorized, Unauthenticated, ValidationFailure
from storybook.models.enums import ScrapbookLayout
from storybook.services import scrapbook_service
from storybook.services.print_service import PrintService


async def _scrapbook(db, caller, image_ids, **overrides):
    fields = dict(title="Summer", description="Beach days", image_ids=image_ids, layout=ScrapbookLayout.COLLAGE)
    fields.update(overrides)
    return await scrapbook_service.create_scrapbook(db, caller, **fields)


async def test_image_order_round_trip(db, as_alice, storage):
    a, b, c = storage.seed(b"a"), storage.seed(b"b"), storage.seed(b"c")
    ids = [c, a, b, a]
    created = await _scrapbook(db, as_alice, ids)

    detail = await scrapbook_service.get_scrapbook(db, as_alice, created.id, storage)

    assert detail.image_ids == ids
    assert [img.id for img in detail.images] == ids
    assert [img.url for img in detail.images] == [f"https://assets.test/{i}" for i in ids]
    assert detail.layout == "collage"


async def test_unresolvable_image_has_no_url(db, as_alice, storage):
    created = await _scrapbook(db, as_alice, ["0" * 32])
    detail = await scrapbook_service.get_scrapbook(db, as_alice, created.id, storage)
    assert detail.images[0].url is None


async def test_create_requires_images(db, as_alice):
    with pytest.raises(ValidationFailure):
        await _scrapbook(db, as_alice, [])


async def test_create_requires_title(db, as_alice):
    with pytest.raises(ValidationFailure):
        await _scrapbook(db, as_alice, ["x"], title="")


async def test_create_requires_caller(db, anonymous):
    with pytest.raises(Unauthenticated):
        await _scrapbook(db, anonymous, ["x"])


async def test_update_by_owner(db, as_alice):
    created = await _scrapbook(db, as_alice, ["a", "b"])
    updated = await scrapbook_service.update_scrapbook(
        db, as_alice, created.id,
        title="Winter", description=None, image_ids=["b", "a"], layout=ScrapbookLayout.TIMELINE,
    )
    assert (updated.title, updated.image_ids, updated.layout) == ("Winter", ["b", "a"], "timeline")


async def test_update_by_non_owner_leaves_record_unchanged(db, as_alice, as_bob):
    created = await _scrapbook(db, as_alice, ["a", "b"])
    with pytest.raises(NotAuthorized):
        await scrapbook_service.update_scrapbook(
            db, as_bob, created.id,
            title="Mine now", description=None, image_ids=["z"], layout=ScrapbookLayout.GRID,
        )
    await db.refresh(created)
    assert (created.title, created.image_ids) == ("Summer", ["a", "b"])


async def test_invalid_update_leaves_record_unchanged(db, as_alice):
    created = await _scrapbook(db, as_alice, ["a", "b"])
    with pytest.raises(ValidationFailure):
        await scrapbook_service.update_scrapbook(
            db, as_alice, created.id,
            title="Emptied", description=None, image_ids=[], layout=ScrapbookLayout.GRID,
        )
    await db.refresh(created)
    assert (created.title, created.image_ids) == ("Summer", ["a", "b"])


async def test_private_scrapbook_hidden_from_others(db, as_alice, as_bob, storage):
    created = await _scrapbook(db, as_alice, ["a"])
    with pytest.raises(NotAuthorized):
        await scrapbook_service.get_scrapbook(db, as_bob, created.id, storage)

    await scrapbook_service.publish_scrapbook(db, as_alice, created.id)
    await scrapbook_service.publish_scrapbook(db, as_alice, created.id)
    detail = await scrapbook_service.get_scrapbook(db, as_bob, created.id, storage)
    assert detail.is_published is True


async def test_list_mine(db, as_alice, as_bob, anonymous):
    mine = await _scrapbook(db, as_alice, ["a"])
    await _scrapbook(db, as_bob, ["b"])
    assert [s.id for s in await scrapbook_service.list_my_scrapbooks(db, as_alice)] == [mine.id]
    assert await scrapbook_service.list_my_scrapbooks(db, anonymous) == []


async def test_print_url(db, as_alice, as_bob):
    printer = PrintService("https://print-demo.com/")
    created = await _scrapbook(db, as_alice, ["a"])

    handle = await scrapbook_service.generate_print_url(db, as_alice, created.id, printer)
    assert handle.print_url == f"https://print-demo.com/scrapbook?id={created.id}"
    assert handle.message == "Demo: Scrapbook printing integration coming soon!"

    with pytest.raises(NotAuthorized):
        await scrapbook_service.generate_print_url(db, as_bob, created.id, printer)
