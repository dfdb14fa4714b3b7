"""
Storage backends for uploaded evidence.

Handlers never talk to a provider SDK directly: the application builds one
backend from settings at startup and hands it out through ``get_storage``.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from fastapi import Request

from sentra.core.config import Settings
from sentra.core.errors import UploadError

logger = logging.getLogger("sentra.storage")

ALLOWED_FORMATS = ["jpg", "jpeg", "png", "gif", "pdf"]


@dataclass
class StoredFile:
    filename: str
    url: str
    key: Optional[str] = None  # provider id used to delete the file


class StorageBackend:
    """Interface every storage backend implements."""

    async def save(self, filename: str, content: bytes, content_type: Optional[str] = None) -> StoredFile:
        raise NotImplementedError

    async def delete(self, stored: StoredFile) -> None:
        raise NotImplementedError


class CloudinaryStorage(StorageBackend):
    """Uploads files to Cloudinary and returns their secure URL."""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str, folder: str):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        logger.info(f"CloudinaryStorage initialized: cloud={cloud_name}, folder={folder}")

    def _upload_sync(self, content: bytes) -> dict:
        return cloudinary.uploader.upload(
            content,
            folder=self.folder,
            resource_type="auto",
            allowed_formats=ALLOWED_FORMATS,
            cloud_name=self.cloud_name,
            api_key=self.api_key,
            api_secret=self.api_secret,
        )

    async def save(self, filename: str, content: bytes, content_type: Optional[str] = None) -> StoredFile:
        loop = asyncio.get_running_loop()
        try:
            result = await loop.run_in_executor(None, partial(self._upload_sync, content))
        except CloudinaryError as e:
            logger.error(f"Cloudinary upload failed: filename={filename}, error={e}")
            raise UploadError(str(e)) from e

        url = result.get("secure_url") or result.get("url")
        logger.info(f"Uploaded to Cloudinary: filename={filename}, url={url}")
        return StoredFile(filename=filename, url=url, key=result.get("public_id"))

    def _destroy_sync(self, public_id: str) -> dict:
        return cloudinary.uploader.destroy(
            public_id,
            cloud_name=self.cloud_name,
            api_key=self.api_key,
            api_secret=self.api_secret,
        )

    async def delete(self, stored: StoredFile) -> None:
        if not stored.key:
            raise ValueError(f"No Cloudinary public id for {stored.url}")
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, partial(self._destroy_sync, stored.key))
        logger.info(f"Deleted from Cloudinary: public_id={stored.key}, result={result.get('result')}")


class LocalStorage(StorageBackend):
    """Writes files into the local uploads directory served under ``/uploads``."""

    def __init__(self, directory: str, base_url: str = "/uploads"):
        self.directory = Path(directory)
        self.base_url = base_url.rstrip("/")
        self.directory.mkdir(parents=True, exist_ok=True)

    async def save(self, filename: str, content: bytes, content_type: Optional[str] = None) -> StoredFile:
        suffix = Path(filename).suffix.lower()
        stored_name = f"{uuid.uuid4().hex}{suffix}"
        async with aiofiles.open(self.directory / stored_name, "wb") as f:
            await f.write(content)

        logger.info(f"Stored locally: filename={filename}, stored_as={stored_name}")
        return StoredFile(filename=filename, url=f"{self.base_url}/{stored_name}", key=stored_name)

    async def delete(self, stored: StoredFile) -> None:
        path = self.directory / (stored.key or Path(stored.url).name)
        if path.exists():
            await aiofiles.os.remove(path)
        logger.info(f"Removed local file: {path}")


def build_storage(settings: Settings) -> StorageBackend:
    if settings.STORAGE_BACKEND == "cloudinary":
        if not (settings.CLOUDINARY_CLOUD_NAME and settings.CLOUDINARY_API_KEY and settings.CLOUDINARY_API_SECRET):
            raise RuntimeError(
                "STORAGE_BACKEND is 'cloudinary' but CLOUDINARY_CLOUD_NAME, "
                "CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET are not all set"
            )
        return CloudinaryStorage(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            folder=settings.CLOUDINARY_FOLDER,
        )
    if settings.STORAGE_BACKEND == "local":
        return LocalStorage(settings.UPLOADS_DIR)
    raise RuntimeError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND}")


def get_storage(request: Request) -> StorageBackend:
    return request.app.state.storage
