import asyncio
from types import SimpleNamespace

import openai
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from storybook.core.errors import UpstreamFailure
from storybook.services.image_provider import OpenAIImageProvider


class StubImages:
    def __init__(self, data=None, error=None, delay=0.0):
        self.data = data
        self.error = error
        self.delay = delay
        self.calls = []

    async def generate(self, **kwargs):
        self.calls.append(kwargs)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=self.data)


def _provider(images=None, **kwargs):
    provider = OpenAIImageProvider(api_key="sk-test", **kwargs)
    if images is not None:
        provider._client = SimpleNamespace(images=images)
    return provider


async def test_generate_passes_request_and_returns_urls():
    images = StubImages(data=[SimpleNamespace(url="https://cdn.test/a.png")])
    provider = _provider(images, model="dall-e-3")

    result = await provider.generate("a fox", n=1, size="1024x1024", quality="standard")

    assert [r.url for r in result] == ["https://cdn.test/a.png"]
    assert images.calls == [
        {"model": "dall-e-3", "prompt": "a fox", "n": 1, "size": "1024x1024", "quality": "standard"}
    ]


async def test_generate_with_no_data_returns_empty_list():
    provider = _provider(StubImages(data=None))
    assert await provider.generate("a fox") == []


async def test_generate_timeout_is_upstream_failure():
    provider = _provider(StubImages(data=[], delay=1.0), generation_timeout=0.05)
    with pytest.raises(UpstreamFailure):
        await provider.generate("a fox")


async def test_generate_openai_error_is_upstream_failure():
    provider = _provider(StubImages(error=openai.OpenAIError("content policy")))
    with pytest.raises(UpstreamFailure) as exc:
        await provider.generate("a fox")
    assert "content policy" in exc.value.message


async def test_missing_api_key_is_upstream_failure():
    provider = OpenAIImageProvider(api_key=None)
    with pytest.raises(UpstreamFailure):
        await provider.generate("a fox")


def test_client_does_not_retry():
    provider = OpenAIImageProvider(api_key="sk-test", generation_timeout=5.0)
    assert provider.client.max_retries == 0


@pytest.fixture
async def image_server():
    async def ok(request):
        return web.Response(body=b"\x89PNG-bytes", content_type="image/png")

    async def missing(request):
        return web.Response(status=404)

    async def empty(request):
        return web.Response(body=b"", content_type="image/png")

    async def slow(request):
        await asyncio.sleep(1.0)
        return web.Response(body=b"late", content_type="image/png")

    app = web.Application()
    app.router.add_get("/ok.png", ok)
    app.router.add_get("/missing.png", missing)
    app.router.add_get("/empty.png", empty)
    app.router.add_get("/slow.png", slow)
    server = TestServer(app)
    await server.start_server()
    yield server
    await server.close()


async def test_download_returns_bytes_and_type(image_server):
    downloaded = await _provider().download(str(image_server.make_url("/ok.png")))
    assert downloaded.data == b"\x89PNG-bytes"
    assert downloaded.content_type == "image/png"


@pytest.mark.parametrize("path", ["/missing.png", "/empty.png"])
async def test_download_bad_response_is_upstream_failure(image_server, path):
    with pytest.raises(UpstreamFailure):
        await _provider().download(str(image_server.make_url(path)))


async def test_download_timeout_is_upstream_failure(image_server):
    provider = _provider(fetch_timeout=0.05)
    with pytest.raises(UpstreamFailure):
        await provider.download(str(image_server.make_url("/slow.png")))
