"""Image storage for recipes. The catalog only ever sees the returned reference string."""

import time
from pathlib import Path
from typing import Protocol

from recipebook.config import settings
from recipebook.errors import BlobStoreError
from recipebook.logging import get_logger

logger = get_logger(__name__)


class BlobStore(Protocol):
    def save(self, data: bytes, filename: str) -> str:
        ...


class LocalBlobStore:
    """Writes blobs under ``upload_dir`` as ``<millis>_<name>`` and returns ``<url_prefix>/<file>``."""

    def __init__(self, upload_dir: str | Path, url_prefix: str = "/uploads") -> None:
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")

    def save(self, data: bytes, filename: str) -> str:
        safe_name = Path(filename or "").name or "image"
        stored_name = f"{int(time.time() * 1000)}_{safe_name}"
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            (self.upload_dir / stored_name).write_bytes(data)
        except OSError as e:
            raise BlobStoreError(f"Could not store image {safe_name}: {e}") from e
        logger.debug("blob.saved path=%s bytes=%s", self.upload_dir / stored_name, len(data))
        return f"{self.url_prefix}/{stored_name}"


blob_store = LocalBlobStore(settings.upload_dir, settings.upload_url_prefix)
