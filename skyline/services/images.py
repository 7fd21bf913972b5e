"""
External image hosting for vacation pictures.

Two stores share one interface:
- CloudinaryImageStore: signed calls to the Cloudinary upload API (httpx).
- LocalImageStore: files under a directory, served at /api/vacations/images
  (used when no Cloudinary credentials are configured).

Every stored image has a public URL (rendered by clients) and a
provider-specific public id (used to release the asset later).
"""

import asyncio
import hashlib
import logging
import mimetypes
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

import httpx

from skyline.config import Settings
from skyline.exceptions import ImageStoreError

logger = logging.getLogger(__name__)

LOCAL_IMAGES_PATH = "/api/vacations/images"


@dataclass(frozen=True)
class StoredImage:
    url: str
    public_id: str


@dataclass(frozen=True)
class ImageUpload:
    """An image received from a client, not yet stored."""

    filename: str
    content: bytes
    content_type: str


class ImageStore(Protocol):
    async def upload(self, filename: str, content: bytes, content_type: str) -> StoredImage: ...

    async def delete(self, public_id: str) -> None: ...


class CloudinaryImageStore:
    """
    Cloudinary upload API client.

    Requests are signed with SHA-1 over the sorted parameters plus the API
    secret. Calls time out after `image_store_timeout` seconds.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.cloud_name = settings.cloudinary_cloud_name
        self.api_key = settings.cloudinary_api_key
        self.api_secret = settings.cloudinary_api_secret
        self.folder = settings.cloudinary_folder
        self.timeout = settings.image_store_timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return f"https://api.cloudinary.com/v1_1/{self.cloud_name}/image"

    def sign(self, params: dict[str, str]) -> str:
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode("utf-8")).hexdigest()

    def _signed(self, params: dict[str, str]) -> dict[str, str]:
        params = {**params, "timestamp": str(int(time.time()))}
        return {**params, "api_key": self.api_key, "signature": self.sign(params)}

    async def _post(self, action: str, data: dict[str, str], files: Optional[dict] = None) -> dict:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(f"{self.base_url}/{action}", data=data, files=files)
        except httpx.HTTPError as exc:
            logger.error("Image store %s failed: %s", action, exc)
            raise ImageStoreError("Image service unavailable.") from exc

        if response.status_code != 200:
            logger.error(
                "Image store %s rejected: %s %s", action, response.status_code, response.text
            )
            raise ImageStoreError("Image service rejected the request.")
        return response.json()

    async def upload(self, filename: str, content: bytes, content_type: str) -> StoredImage:
        data = self._signed({"folder": self.folder})
        result = await self._post("upload", data, files={"file": (filename, content, content_type)})
        logger.info("Uploaded image %s", result.get("public_id"))
        return StoredImage(url=result["secure_url"], public_id=result["public_id"])

    async def delete(self, public_id: str) -> None:
        result = await self._post("destroy", self._signed({"public_id": public_id}))
        # "not found" means the asset is already gone
        if result.get("result") not in ("ok", "not found"):
            raise ImageStoreError("Image service could not delete the image.")
        logger.info("Released image %s", public_id)


class LocalImageStore:
    """Stores images as files; the public id is the file name."""

    def __init__(self, directory: Path, base_url: str):
        self.directory = Path(directory)
        self.base_url = base_url.rstrip("/")

    def path_for(self, public_id: str) -> Path:
        # Public ids are generated file names; refuse anything path-like
        name = Path(public_id).name
        return self.directory / name

    async def upload(self, filename: str, content: bytes, content_type: str) -> StoredImage:
        suffix = Path(filename).suffix or mimetypes.guess_extension(content_type) or ""
        public_id = f"{uuid.uuid4().hex}{suffix.lower()}"
        self.directory.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(self.path_for(public_id).write_bytes, content)
        return StoredImage(url=f"{self.base_url}{LOCAL_IMAGES_PATH}/{public_id}", public_id=public_id)

    async def delete(self, public_id: str) -> None:
        path = self.path_for(public_id)
        await asyncio.to_thread(path.unlink, missing_ok=True)


def build_image_store(settings: Settings) -> ImageStore:
    """Pick the configured image store."""
    if settings.image_store_configured:
        return CloudinaryImageStore(settings)
    logger.warning("Cloudinary is not configured; storing images in %s", settings.image_dir)
    return LocalImageStore(Path(settings.image_dir), settings.public_base_url)
