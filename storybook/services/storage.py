import asyncio
import logging
import os
import re
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional

from storybook.core.config import settings

logger = logging.getLogger(__name__)

# uuid hex plus an optional short extension; anything else is not one of ours
_ASSET_ID_RE = re.compile(r"^[0-9a-f]{32}(\.[a-z0-9]{1,5})?$")

_EXT_BY_CONTENT_TYPE = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


def is_valid_asset_id(asset_id: Optional[str]) -> bool:
    return bool(asset_id) and bool(_ASSET_ID_RE.match(str(asset_id)))


def new_asset_id(*, content_type: Optional[str] = None, key_hint: Optional[str] = None) -> str:
    ext = ""
    if key_hint and "." in key_hint:
        ext = "." + key_hint.rsplit(".", 1)[-1].lower()
    elif content_type:
        ext = _EXT_BY_CONTENT_TYPE.get(content_type.split(";")[0].strip().lower(), "")
    if ext and not re.match(r"^\.[a-z0-9]{1,5}$", ext):
        ext = ""
    return f"{uuid.uuid4().hex}{ext}"


@dataclass
class UploadChannel:
    """Target for a direct client upload that bypasses the API process"""
    upload_url: str
    method: str = "POST"
    fields: Dict[str, str] = field(default_factory=dict)
    asset_id: Optional[str] = None


class Storage:
    """Asset store: opaque ids in, fetchable URLs out."""

    def store(self, data: bytes, *, content_type: Optional[str] = None, key_hint: Optional[str] = None) -> str:
        raise NotImplementedError

    def resolve_url(self, asset_id: str) -> Optional[str]:
        raise NotImplementedError

    def exists(self, asset_id: str) -> bool:
        return self.resolve_url(asset_id) is not None

    def create_upload_channel(self, *, upload_token: str) -> UploadChannel:
        raise NotImplementedError


class LocalStorage(Storage):
    def __init__(self, base_dir: str, public_base: str = "/static", upload_base: str = "/images/upload") -> None:
        self.base_dir = base_dir
        self.public_base = public_base.rstrip("/")
        self.upload_base = upload_base.rstrip("/")
        os.makedirs(self.base_dir, exist_ok=True)

    def _path(self, asset_id: str) -> str:
        return os.path.join(self.base_dir, asset_id)

    def store(self, data: bytes, *, content_type: Optional[str] = None, key_hint: Optional[str] = None) -> str:
        asset_id = new_asset_id(content_type=content_type, key_hint=key_hint)
        with open(self._path(asset_id), "wb") as f:
            f.write(data)
        return asset_id

    def resolve_url(self, asset_id: str) -> Optional[str]:
        if not is_valid_asset_id(asset_id):
            return None
        if not os.path.isfile(self._path(asset_id)):
            return None
        return f"{self.public_base}/{asset_id}"

    def create_upload_channel(self, *, upload_token: str) -> UploadChannel:
        # the asset id is assigned when the bytes arrive (returned as storageId)
        return UploadChannel(upload_url=f"{self.upload_base}/{upload_token}", method="POST")


class S3Storage(Storage):
    def __init__(
        self,
        *,
        endpoint_url: Optional[str],
        access_key: str,
        secret_key: str,
        bucket: str,
        region: Optional[str] = None,
        public_base_url: Optional[str] = None,
        key_prefix: str = "uploads",
        presign_expires: int = 3600,
        max_upload_bytes: int = 10 * 1024 * 1024,
    ) -> None:
        import boto3
        from botocore.config import Config
        from botocore.exceptions import ClientError

        self._client_error = ClientError
        addressing_style = (os.getenv("S3_ADDRESSING_STYLE") or "path").lower()
        cfg = Config(signature_version="s3v4", s3={"addressing_style": addressing_style})
        self.client = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
            config=cfg,
        )
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.key_prefix = key_prefix.strip("/")
        self.presign_expires = max(60, int(presign_expires))
        self.max_upload_bytes = max_upload_bytes
        try:
            self.client.head_bucket(Bucket=self.bucket)
        except self._client_error as e:
            raise RuntimeError(f"Storage bucket '{self.bucket}' not found. Create it and set S3_BUCKET correctly. Original: {e}") from e

    def _key(self, asset_id: str) -> str:
        return f"{self.key_prefix}/{asset_id}" if self.key_prefix else asset_id

    def store(self, data: bytes, *, content_type: Optional[str] = None, key_hint: Optional[str] = None) -> str:
        asset_id = new_asset_id(content_type=content_type, key_hint=key_hint)
        extra_args = {}
        if content_type:
            extra_args["ContentType"] = content_type
        self.client.put_object(Bucket=self.bucket, Key=self._key(asset_id), Body=data, **extra_args)
        return asset_id

    def resolve_url(self, asset_id: str) -> Optional[str]:
        if not is_valid_asset_id(asset_id):
            return None
        key = self._key(asset_id)
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
        except self._client_error:
            return None
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return self.client.generate_presigned_url(
            ClientMethod="get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=self.presign_expires,
        )

    def create_upload_channel(self, *, upload_token: str) -> UploadChannel:
        # S3 needs the key before the upload, so the asset id is fixed here
        asset_id = new_asset_id()
        post = self.client.generate_presigned_post(
            Bucket=self.bucket,
            Key=self._key(asset_id),
            Conditions=[["content-length-range", 1, self.max_upload_bytes]],
            ExpiresIn=self.presign_expires,
        )
        return UploadChannel(upload_url=post["url"], method="POST", fields=dict(post.get("fields") or {}), asset_id=asset_id)


_storage: Optional[Storage] = None


def build_storage() -> Storage:
    backend = (settings.STORAGE_BACKEND or "local").lower()
    if backend == "s3":
        if not (settings.S3_ACCESS_KEY_ID and settings.S3_SECRET_ACCESS_KEY and settings.S3_BUCKET):
            raise RuntimeError("S3 storage is not fully configured")
        return S3Storage(
            endpoint_url=settings.S3_ENDPOINT_URL,
            access_key=settings.S3_ACCESS_KEY_ID,
            secret_key=settings.S3_SECRET_ACCESS_KEY,
            bucket=settings.S3_BUCKET,
            region=settings.S3_REGION,
            public_base_url=settings.S3_PUBLIC_BASE_URL,
            presign_expires=settings.S3_PRESIGN_EXPIRES_SECONDS,
            max_upload_bytes=settings.MAX_UPLOAD_BYTES,
        )
    from storybook.core.paths import get_upload_dir
    base = settings.PUBLIC_BASE_URL.rstrip("/")
    return LocalStorage(base_dir=get_upload_dir(), public_base=f"{base}/static", upload_base=f"{base}/images/upload")


def get_storage() -> Storage:
    """Process-wide storage (FastAPI dependency)"""
    global _storage
    if _storage is None:
        _storage = build_storage()
        logger.info(f"Asset storage ready: {type(_storage).__name__}")
    return _storage


async def resolve_asset_url(storage: Storage, asset_id: Optional[str]) -> Optional[str]:
    """resolve_url off the event loop; None for a missing id"""
    if not asset_id:
        return None
    return await asyncio.to_thread(storage.resolve_url, asset_id)
