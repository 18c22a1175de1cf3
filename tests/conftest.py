import os
import tempfile

# settings are read at import time
_UPLOAD_DIR = tempfile.mkdtemp(prefix="storybook-test-uploads-")
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["UPLOAD_DIRECTORY"] = _UPLOAD_DIR
os.environ["STORAGE_BACKEND"] = "local"
os.environ["PRINT_BASE_URL"] = "https://print-demo.com"

from typing import Dict, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from storybook.core.database import Base, get_db
from storybook.core.security import CallerContext, create_access_token
from storybook.main import app
from storybook.models.user import User
from storybook.services.image_provider import DownloadedImage, GeneratedImage, ImageProvider, get_image_provider
from storybook.services.storage import Storage, UploadChannel, get_storage, is_valid_asset_id, new_asset_id


class FakeStorage(Storage):
    """In-memory asset store"""

    def __init__(self):
        self.blobs: Dict[str, bytes] = {}

    def store(self, data, *, content_type=None, key_hint=None):
        asset_id = new_asset_id(content_type=content_type, key_hint=key_hint)
        self.blobs[asset_id] = data
        return asset_id

    def resolve_url(self, asset_id):
        if not is_valid_asset_id(asset_id) or asset_id not in self.blobs:
            return None
        return f"https://assets.test/{asset_id}"

    def create_upload_channel(self, *, upload_token):
        return UploadChannel(upload_url=f"https://assets.test/upload/{upload_token}")

    def seed(self, data: bytes = b"uploaded-image") -> str:
        return self.store(data, content_type="image/png")


class FakeImageProvider(ImageProvider):
    """Scripted provider that records every call"""

    def __init__(self, urls: Optional[List[Optional[str]]] = None, data: bytes = b"generated-png"):
        self.urls = ["https://provider.test/image.png"] if urls is None else urls
        self.data = data
        self.generate_error: Optional[Exception] = None
        self.download_error: Optional[Exception] = None
        self.calls: List[dict] = []
        self.downloads: List[str] = []

    @property
    def prompts(self) -> List[str]:
        return [c["prompt"] for c in self.calls]

    async def generate(self, prompt, *, n=1, size="1024x1024", quality="standard"):
        self.calls.append({"prompt": prompt, "n": n, "size": size, "quality": quality})
        if self.generate_error is not None:
            raise self.generate_error
        return [GeneratedImage(url=u) for u in self.urls]

    async def download(self, url):
        self.downloads.append(url)
        if self.download_error is not None:
            raise self.download_error
        return DownloadedImage(data=self.data, content_type="image/png")


@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def provider():
    return FakeImageProvider()


@pytest.fixture
def make_user(session_factory):
    async def _make(username: str, password_hash: str = "not-a-real-hash") -> User:
        async with session_factory() as session:
            user = User(email=f"{username}@example.com", username=username, hashed_password=password_hash)
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user
    return _make


@pytest.fixture
async def alice(make_user):
    return await make_user("alice")


@pytest.fixture
async def bob(make_user):
    return await make_user("bob")


@pytest.fixture
def as_alice(alice):
    return CallerContext.for_user(alice.id)


@pytest.fixture
def as_bob(bob):
    return CallerContext.for_user(bob.id)


@pytest.fixture
def anonymous():
    return CallerContext.anonymous()


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(data={'sub': str(user.id)})}"}
    return _headers


@pytest.fixture
async def client(session_factory, storage, provider):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_image_provider] = lambda: provider
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
