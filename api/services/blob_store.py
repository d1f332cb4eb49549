"""Opaque key/value blob persistence for notes and preferences."""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path
from typing import Protocol

import structlog

from ..exceptions import BlobStoreError

logger = structlog.get_logger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class BlobStore(Protocol):
    """Minimal key/value contract the note store persists through."""

    def get(self, key: str) -> bytes | None: ...

    def set(self, key: str, data: bytes) -> None: ...


class InMemoryBlobStore:
    """Blob store held in a dict, for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, bytes] | None = None):
        self.blobs: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self.blobs.get(key)

    def set(self, key: str, data: bytes) -> None:
        self.blobs[key] = bytes(data)


class FileBlobStore:
    """Blob store writing one ``<key>.json`` file per key under a directory.

    Writes go to a temporary file in the same directory which then replaces the
    target, so a crash mid-write leaves the previous blob intact.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory).expanduser()

    def _path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise BlobStoreError(f"Invalid blob key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> bytes | None:
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.error("blob_read_failed", key=key, path=str(path), error=str(e))
            raise BlobStoreError(f"Could not read blob {key!r}: {e}") from e

    def set(self, key: str, data: bytes) -> None:
        path = self._path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as tmp_file:
                    tmp_file.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error("blob_write_failed", key=key, path=str(path), error=str(e))
            raise BlobStoreError(f"Could not write blob {key!r}: {e}") from e

        logger.debug("blob_written", key=key, size=len(data))
