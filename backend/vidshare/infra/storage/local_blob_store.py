"""Filesystem-backed blob store."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import BinaryIO

from vidshare.services._shared.errors import BlobStoreError
from vidshare.services._shared.ports.blob_store import BlobStore

log = logging.getLogger(__name__)


class LocalBlobStore(BlobStore):
    """
    Store blobs as files under ``root``.

    Writes go to a temporary file in the same directory and are renamed into
    place, so a reader never sees a partial file under the final key.
    ``OSError`` from the filesystem is raised as :class:`BlobStoreError`.
    """

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        name = os.path.basename(key)
        if not name or name != key or name in {".", ".."}:
            raise BlobStoreError(f"Invalid blob key: {key!r}")
        return self.root / name

    def put(self, key: str, data: bytes) -> None:
        target = self._path(key)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=".upload-")
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(data)
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            log.error("Blob write failed", extra={"error_type": type(exc).__name__})
            raise BlobStoreError(f"Could not write blob {key}") from exc

    def open(self, key: str) -> BinaryIO:
        try:
            return self._path(key).open("rb")
        except OSError as exc:
            raise BlobStoreError(f"Could not open blob {key}") from exc

    def size(self, key: str) -> int:
        try:
            return self._path(key).stat().st_size
        except OSError as exc:
            raise BlobStoreError(f"Could not stat blob {key}") from exc

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()
