"""
External image generation provider and provider-hosted content fetch
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional

import aiohttp
import openai
from openai import AsyncOpenAI

from storybook.core.config import settings
from storybook.core.errors import UpstreamFailure

logger = logging.getLogger(__name__)


@dataclass
class GeneratedImage:
    url: Optional[str]


@dataclass
class DownloadedImage:
    data: bytes
    content_type: str = "image/png"


class ImageProvider:
    """Contract: generate(prompt, n, size, quality) -> [GeneratedImage]; download(url) -> bytes.

    Implementations raise UpstreamFailure for transport and provider errors
    and may return an empty list when nothing was generated.
    """

    async def generate(self, prompt: str, *, n: int = 1, size: str = "1024x1024", quality: str = "standard") -> List[GeneratedImage]:
        raise NotImplementedError

    async def download(self, url: str) -> DownloadedImage:
        raise NotImplementedError


class OpenAIImageProvider(ImageProvider):
    def __init__(
        self,
        *,
        api_key: Optional[str],
        base_url: Optional[str] = None,
        model: str = "dall-e-3",
        generation_timeout: float = 120.0,
        fetch_timeout: float = 30.0,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self.generation_timeout = generation_timeout
        self.fetch_timeout = fetch_timeout
        self._client: Optional[AsyncOpenAI] = None

    @property
    def client(self) -> AsyncOpenAI:
        if not self.api_key:
            raise UpstreamFailure("OPENAI_API_KEY not set")
        if self._client is None:
            # retries are left to the user
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.generation_timeout,
                max_retries=0,
            )
        return self._client

    async def generate(self, prompt: str, *, n: int = 1, size: str = "1024x1024", quality: str = "standard") -> List[GeneratedImage]:
        try:
            response = await asyncio.wait_for(
                self.client.images.generate(
                    model=self.model,
                    prompt=prompt,
                    n=n,
                    size=size,
                    quality=quality,
                ),
                timeout=self.generation_timeout,
            )
        except asyncio.TimeoutError as e:
            raise UpstreamFailure(f"image generation timed out after {self.generation_timeout}s") from e
        except openai.OpenAIError as e:
            raise UpstreamFailure(f"openai image generation failed: {e}") from e
        return [GeneratedImage(url=getattr(item, "url", None)) for item in (response.data or [])]

    async def download(self, url: str) -> DownloadedImage:
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(url, timeout=aiohttp.ClientTimeout(total=self.fetch_timeout)) as resp:
                    if resp.status >= 400:
                        raise UpstreamFailure(f"image fetch failed with HTTP {resp.status}")
                    data = await resp.read()
                    content_type = (resp.headers.get("Content-Type") or "image/png").split(";")[0].strip()
        except asyncio.TimeoutError as e:
            raise UpstreamFailure(f"image fetch timed out after {self.fetch_timeout}s") from e
        except aiohttp.ClientError as e:
            raise UpstreamFailure(f"image fetch failed: {e}") from e
        if not data:
            raise UpstreamFailure("image fetch returned no content")
        return DownloadedImage(data=data, content_type=content_type)


_provider: Optional[ImageProvider] = None


def get_image_provider() -> ImageProvider:
    """Process-wide provider (FastAPI dependency)"""
    global _provider
    if _provider is None:
        _provider = OpenAIImageProvider(
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
            model=settings.IMAGE_MODEL,
            generation_timeout=settings.IMAGE_GENERATION_TIMEOUT_SECONDS,
            fetch_timeout=settings.IMAGE_FETCH_TIMEOUT_SECONDS,
        )
    return _provider
