import logging
from typing import List, Optional, Sequence

from fastapi import UploadFile

from sentra.core.config import settings
from sentra.core.errors import UploadError
from sentra.services.storage import StorageBackend, StoredFile

logger = logging.getLogger("sentra.storage")


def selected_files(files: Optional[Sequence[UploadFile]]) -> List[UploadFile]:
    # Browsers send an empty part when the file input is left blank
    return [f for f in (files or []) if f is not None and f.filename]


def validate_uploads(files: Sequence[UploadFile], max_count: Optional[int] = None) -> None:
    """Reject too many files or files of a type we do not accept."""
    max_count = max_count or settings.MAX_ATTACHMENTS
    if len(files) > max_count:
        raise UploadError(f"Too many files: at most {max_count} allowed")

    for file in files:
        if file.content_type not in settings.ALLOWED_UPLOAD_TYPES:
            raise UploadError(f"File type {file.content_type} not supported")


async def read_limited(file: UploadFile, max_size: Optional[int] = None) -> bytes:
    max_size = max_size or settings.MAX_UPLOAD_SIZE
    content = await file.read(max_size + 1)
    if len(content) > max_size:
        raise UploadError(f"File {file.filename} is too large: limit is {max_size // (1024 * 1024)}MB")
    return content


async def store_uploads(
    storage: StorageBackend, files: Optional[Sequence[UploadFile]]
) -> List[StoredFile]:
    """Validate and store every submitted file, keeping submission order."""
    files = selected_files(files)
    if not files:
        return []

    validate_uploads(files)

    # Read everything before the first provider call so a bad file uploads nothing
    contents = [await read_limited(file) for file in files]

    stored = []
    for file, content in zip(files, contents):
        stored.append(await storage.save(file.filename, content, file.content_type))

    logger.info(f"Stored {len(stored)} file(s)")
    return stored


async def discard_uploads(storage: StorageBackend, stored: Sequence[StoredFile]) -> None:
    """Best-effort removal of files whose database write failed."""
    for file in stored:
        try:
            await storage.delete(file)
        except Exception as e:
            logger.error(f"Orphaned upload left in storage: url={file.url}, error={e}")
