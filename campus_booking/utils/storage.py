import os
import uuid
import logging
from typing import Optional
from sqlalchemy.orm import Session
from campus_booking.config import STORAGE_ROOT, STORAGE_URL
from campus_booking.db import after_commit

logger = logging.getLogger(__name__)

PHOTO_DIRECTORY = "uploads/rooms"
PHOTO_CONTENT_TYPES = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
}
PHOTO_MAX_BYTES = 2048 * 1024


class PhotoDisk:
    """Files kept under a root directory and addressed by relative path."""

    def __init__(self, root: str, base_url: str):
        self.root = root
        self.base_url = base_url.rstrip("/")

    def _full_path(self, path: str) -> str:
        full = os.path.abspath(os.path.join(self.root, path))
        if not full.startswith(os.path.abspath(self.root) + os.sep):
            raise ValueError(f"Path escapes storage root: {path}")
        return full

    def store(self, content: bytes, directory: str, extension: str) -> str:
        path = f"{directory}/{uuid.uuid4().hex}{extension}"
        full = self._full_path(path)
        os.makedirs(os.path.dirname(full), exist_ok=True)
        with open(full, "wb") as fh:
            fh.write(content)
        logger.debug(f"Stored file: {path}")
        return path

    def exists(self, path: str) -> bool:
        return os.path.exists(self._full_path(path))

    def delete(self, path: str):
        full = self._full_path(path)
        if os.path.exists(full):
            os.remove(full)
            logger.debug(f"Deleted file: {path}")

    def url(self, path: Optional[str]) -> Optional[str]:
        if not path:
            return None
        return f"{self.base_url}/{path}"


photo_disk = PhotoDisk(STORAGE_ROOT, STORAGE_URL)


def get_photo_disk() -> PhotoDisk:
    return photo_disk


def delete_after_commit(db: Session, disk: PhotoDisk, path: Optional[str]):
    """Remove ``path`` from ``disk`` once the surrounding transaction commits."""
    if not path:
        return

    def _cleanup():
        try:
            disk.delete(path)
        except OSError as e:
            # the row change is already durable, so the file is left behind
            logger.error(f"Photo cleanup failed for {path}: {e}")

    after_commit(db, _cleanup)
