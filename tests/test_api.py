import uuid

from storybook.core.config import settings
from storybook.core.security import create_upload_token, get_password_hash


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_register_login_me(client):
    response = await client.post(
        "/auth/register",
        json={"email": "kid@example.com", "username": "kid", "password": "crayons123"},
    )
    assert response.status_code == 201

    duplicate = await client.post(
        "/auth/register",
        json={"email": "kid@example.com", "username": "kid2", "password": "crayons123"},
    )
    assert duplicate.status_code == 422

    login = await client.post("/auth/login", json={"email": "kid@example.com", "password": "crayons123"})
    assert login.status_code == 200
    tokens = login.json()

    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"})
    assert me.status_code == 200
    assert me.json()["username"] == "kid"

    refreshed = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refreshed.status_code == 200
    assert refreshed.json()["token_type"] == "bearer"


async def test_login_with_wrong_password(client, make_user):
    await make_user("carol", password_hash=get_password_hash("right-password"))
    response = await client.post("/auth/login", json={"email": "carol@example.com", "password": "wrong-password"})
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


async def test_create_character_requires_login(client, provider):
    response = await client.post("/characters", json={"name": "Luna", "description": "a fairy"})
    assert response.status_code == 401
    assert response.json() == {"detail": "Not authenticated"}
    assert provider.calls == []


async def test_create_character_generates_image(client, alice, auth_headers, provider):
    response = await client.post(
        "/characters",
        json={"name": "Luna", "description": "a fairy with silver wings", "style": "watercolor"},
        headers=auth_headers(alice),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["generation"]["success"] is True
    assert body["generation"]["message"] == "Character image generated successfully! ✨"
    assert body["character"]["transformed_image_url"].startswith("https://assets.test/")
    assert len(provider.calls) == 1

    mine = await client.get("/characters/my", headers=auth_headers(alice))
    assert [c["name"] for c in mine.json()["items"]] == ["Luna"]


async def test_generation_failure_is_reported_not_raised(client, alice, auth_headers, provider):
    provider.urls = []
    response = await client.post(
        "/characters",
        json={"name": "Luna", "description": "a fairy"},
        headers=auth_headers(alice),
    )
    assert response.status_code == 201
    assert response.json()["generation"] == {
        "success": False,
        "message": "Failed to generate character image. Please try again.",
        "image_url": None,
    }


async def test_invalid_style_is_rejected(client, alice, auth_headers):
    response = await client.post(
        "/characters",
        json={"name": "Luna", "description": "a fairy", "style": "oil-painting"},
        headers=auth_headers(alice),
    )
    assert response.status_code == 422


async def test_anonymous_lists_are_empty(client):
    for path in ("/characters/my", "/stories/my", "/scrapbooks/my"):
        response = await client.get(path)
        assert response.status_code == 200
        assert response.json() == {"items": []}


async def test_patch_by_non_owner(client, alice, bob, auth_headers, storage):
    image_id = storage.seed()
    created = await client.post(
        "/characters",
        json={"name": "Luna", "description": "a fairy", "original_image_id": image_id},
        headers=auth_headers(alice),
    )
    character_id = created.json()["character"]["id"]

    response = await client.patch(f"/characters/{character_id}", json={"name": "Rex"}, headers=auth_headers(bob))
    assert response.status_code == 403

    mine = await client.get(f"/characters/{character_id}", headers=auth_headers(alice))
    assert mine.json()["name"] == "Luna"


async def test_unknown_character_is_404(client, alice, auth_headers):
    response = await client.post(f"/characters/{uuid.uuid4()}/publish", headers=auth_headers(alice))
    assert response.status_code == 404


async def test_story_page_flow(client, alice, auth_headers):
    headers = auth_headers(alice)
    created = await client.post(
        "/stories",
        json={
            "title": "Three Pages",
            "pages": [
                {"page_number": 1, "text": "one"},
                {"page_number": 2, "text": "two"},
                {"page_number": 3, "text": "three"},
            ],
        },
        headers=headers,
    )
    assert created.status_code == 201
    story_id = created.json()["id"]

    removed = await client.delete(f"/stories/{story_id}/pages/2", headers=headers)
    assert [(p["page_number"], p["text"]) for p in removed.json()["pages"]] == [(1, "one"), (2, "three")]

    missing = await client.delete(f"/stories/{story_id}/pages/9", headers=headers)
    assert missing.status_code == 404

    printed = await client.post(f"/stories/{story_id}/print", headers=headers)
    assert printed.json()["print_url"] == f"https://print-demo.com/order?story={story_id}"


async def test_premade_stories_and_document(client):
    premade = await client.get("/stories/premade")
    assert [s["id"] for s in premade.json()] == ["sample1", "sample2"]

    document = await client.get("/stories/premade/sample2/document")
    assert document.status_code == 200
    assert document.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    )
    assert 'filename="twinkle_the_unicorn_and_belle_belle_story_template.docx"' in document.headers["content-disposition"]
    assert document.content[:2] == b"PK"


async def test_scrapbook_round_trip(client, alice, auth_headers, storage):
    headers = auth_headers(alice)
    ids = [storage.seed(b"1"), storage.seed(b"2"), storage.seed(b"3")]
    created = await client.post(
        "/scrapbooks",
        json={"title": "Trip", "image_ids": list(reversed(ids)), "layout": "magazine"},
        headers=headers,
    )
    assert created.status_code == 201

    detail = await client.get(f"/scrapbooks/{created.json()['id']}", headers=headers)
    assert [img["id"] for img in detail.json()["images"]] == list(reversed(ids))


async def test_scrapbook_without_images(client, alice, auth_headers):
    response = await client.post(
        "/scrapbooks", json={"title": "Empty", "image_ids": []}, headers=auth_headers(alice)
    )
    assert response.status_code == 422
    assert response.json() == {"detail": "Select at least one image"}


async def test_upload_and_transform(client, alice, auth_headers, storage):
    headers = auth_headers(alice)
    channel = await client.post("/images/upload-url", headers=headers)
    assert channel.status_code == 200
    token = channel.json()["upload_url"].rsplit("/", 1)[-1]

    uploaded = await client.post(
        f"/images/upload/{token}", content=b"\x89PNG-data", headers={"Content-Type": "image/png"}
    )
    assert uploaded.status_code == 200
    storage_id = uploaded.json()["storageId"]
    assert storage.blobs[storage_id] == b"\x89PNG-data"

    url = await client.get(f"/images/{storage_id}/url")
    assert url.json() == {"asset_id": storage_id, "url": f"https://assets.test/{storage_id}"}

    transformed = await client.post(
        "/images/transform", json={"original_image_id": storage_id, "style": "cartoon"}, headers=headers
    )
    assert transformed.json()["message"] == "Demo: Transforming to cartoon style! Real AI integration coming soon."

    listed = await client.get("/images/transformed", headers=headers)
    assert [i["original_image_id"] for i in listed.json()["items"]] == [storage_id]


async def test_upload_with_bad_token(client):
    response = await client.post("/images/upload/not-a-token", content=b"data", headers={"Content-Type": "image/png"})
    assert response.status_code == 401


async def test_chunked_upload_over_limit_is_rejected(client, alice, storage, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 8)
    before = dict(storage.blobs)

    async def body():
        for _ in range(4):
            yield b"\x89PNG"

    response = await client.post(
        f"/images/upload/{create_upload_token(alice.id)}", content=body(), headers={"Content-Type": "image/png"}
    )

    assert response.status_code == 422
    assert storage.blobs == before
