# feria/core/storage.py
import logging
import mimetypes
import uuid
from dataclasses import dataclass
from functools import lru_cache

from fastapi import UploadFile
from supabase import Client

from feria.core.config import get_settings
from feria.core.supabase_client import supabase_admin

logger = logging.getLogger(__name__)

settings = get_settings()


class StorageError(RuntimeError):
    """Raised when the storage service rejects an upload or delete."""


@dataclass(frozen=True)
class UploadedFile:
    """A multipart upload read into memory."""

    filename: str
    content_type: str | None
    data: bytes


@dataclass(frozen=True)
class StoredFile:
    """Reference to an object in the bucket."""

    file_id: str
    url: str


def read_upload(file: UploadFile | None) -> UploadedFile | None:
    """Read a multipart upload into memory; None when the part was not sent."""
    if file is None or not file.filename:
        return None
    return UploadedFile(
        filename=file.filename,
        content_type=file.content_type,
        data=file.file.read(),
    )


def generate_filename(original: str, content_type: str | None = None) -> str:
    """
    Generate a random object name, keeping the original extension.

    Example:
        generate_filename("poster.PNG") -> "<uuid4>.png"
    """
    ext = ""
    if "." in original:
        ext = original.rsplit(".", 1)[1].lower()
    elif content_type:
        ext = (mimetypes.guess_extension(content_type) or "").lstrip(".")
    return f"{uuid.uuid4()}.{ext}" if ext else str(uuid.uuid4())


class StorageService:
    """
    Upload / delete files in a Supabase Storage bucket.

    The object path inside the bucket is the file id, e.g.
    ``banners/3f2c...e1.png``.
    """

    def __init__(self, client: Client, bucket: str):
        self.client = client
        self.bucket = bucket

    @property
    def _marker(self) -> str:
        return f"/storage/v1/object/public/{self.bucket}/"

    def upload(self, file: UploadedFile, folder: str) -> StoredFile:
        """
        Upload a file under `folder` and return its id and public URL.

        Raises:
            StorageError: if the storage service rejects the upload.
        """
        file_id = f"{folder}/{generate_filename(file.filename, file.content_type)}"
        options = {"upsert": "true"}
        if file.content_type:
            options["content-type"] = file.content_type
        try:
            bucket = self.client.storage.from_(self.bucket)
            bucket.upload(file_id, file.data, options)
            url = bucket.get_public_url(file_id)
        except Exception as exc:
            raise StorageError(f"Failed to upload {file.filename}") from exc
        logger.info("Uploaded %s (%d bytes) as %s", file.filename, len(file.data), file_id)
        return StoredFile(file_id=file_id, url=url)

    def delete(self, file_id: str) -> None:
        """
        Delete an object by its id (path relative to the bucket).

        Raises:
            StorageError: if the storage service rejects the delete.
        """
        try:
            self.client.storage.from_(self.bucket).remove([file_id])
        except Exception as exc:
            raise StorageError(f"Failed to delete {file_id}") from exc
        logger.info("Deleted %s", file_id)

    def id_from_url(self, url: str) -> str | None:
        """
        Given a public URL, extract the object path relative to the bucket.

        Example:
            https://<proj>.supabase.co/storage/v1/object/public/assets/logos/u.png
            -> 'logos/u.png'
        """
        idx = url.find(self._marker)
        if idx == -1:
            return None
        path = url[idx + len(self._marker):].split("?", 1)[0]
        return path or None

    def delete_url(self, url: str | None) -> None:
        """
        Convenience helper: delete a file by its public URL.
        No-op if the URL does not belong to this bucket.
        """
        if not url:
            return
        file_id = self.id_from_url(url)
        if file_id:
            self.delete(file_id)


@lru_cache
def get_storage() -> StorageService:
    """FastAPI dependency: storage service bound to the configured bucket."""
    return StorageService(supabase_admin(), settings.STORAGE_BUCKET)
