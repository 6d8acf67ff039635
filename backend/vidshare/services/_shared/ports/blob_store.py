from __future__ import annotations

import io
from typing import BinaryIO, Protocol

from vidshare.services._shared.errors import BlobStoreError


class BlobStore(Protocol):
    """
    Opaque byte storage keyed by string.

    The store is not transactional. Writes happen inside a unit of work
    *before* commit; a failed write aborts the transaction, and a partially
    written blob is never referenced by any row.
    """

    def put(self, key: str, data: bytes) -> None: ...

    def open(self, key: str) -> BinaryIO: ...

    def size(self, key: str) -> int: ...

    def exists(self, key: str) -> bool: ...


class InMemoryBlobStore(BlobStore):
    """Dictionary-backed store for unit tests."""

    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}

    def put(self, key: str, data: bytes) -> None:
        self.blobs[key] = bytes(data)

    def open(self, key: str) -> BinaryIO:
        try:
            return io.BytesIO(self.blobs[key])
        except KeyError:
            raise BlobStoreError(f"Blob not found: {key}") from None

    def size(self, key: str) -> int:
        try:
            return len(self.blobs[key])
        except KeyError:
            raise BlobStoreError(f"Blob not found: {key}") from None

    def exists(self, key: str) -> bool:
        return key in self.blobs


class FailingBlobStore(InMemoryBlobStore):
    """Store whose writes always fail; reads behave like the in-memory store."""

    def put(self, key: str, data: bytes) -> None:
        raise BlobStoreError(f"Simulated write failure for {key}")
