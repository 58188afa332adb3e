"""
Durable Polytope Store
======================

Directory of encoded records, one file per cache key:

    <root>/<sha1(key)>.bin

The store only moves bytes; encoding and validation live in
serialization.py. Every OS-level failure surfaces as CacheIOFailure so the
cache layer has exactly one exception to recover from.

Writes go to a temporary file in the same directory and are renamed into
place, so a reader never sees a partially written record.
"""

import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from ..spec.constants import DEFAULT_CACHE_DIR, DURABLE_RECORD_SUFFIX
from ..spec.errors import CacheIOFailure

logger = logging.getLogger(__name__)


class DurablePolytopeStore:
    """Byte-level key/value store on the local filesystem."""

    def __init__(self, path: Union[str, Path, None] = None):
        self.path = Path(path) if path is not None else DEFAULT_CACHE_DIR
        self._opened = False

    def open(self) -> "DurablePolytopeStore":
        """
        Create the directory if needed and check that it is writable.

        Raises:
            CacheIOFailure: directory cannot be created or written
        """
        try:
            self.path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheIOFailure(f"Cannot create cache directory {self.path}: {exc}") from exc
        if not os.access(self.path, os.W_OK):
            raise CacheIOFailure(f"Cache directory {self.path} is not writable")

        self._opened = True
        logger.debug("Durable store opened at %s", self.path)
        return self

    @property
    def is_open(self) -> bool:
        return self._opened

    def path_for(self, key: str) -> Path:
        digest = hashlib.sha1(key.encode("utf-8")).hexdigest()
        return self.path / f"{digest}{DURABLE_RECORD_SUFFIX}"

    def get(self, key: str) -> Optional[bytes]:
        """
        Stored bytes for `key`, or None if absent.

        Raises:
            CacheIOFailure: store not opened, or the file cannot be read
        """
        self._require_open()
        target = self.path_for(key)
        try:
            return target.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise CacheIOFailure(f"Cannot read {target}: {exc}") from exc

    def set(self, key: str, data: bytes) -> None:
        """
        Store bytes for `key` (atomic replace).

        Raises:
            CacheIOFailure: store not opened, or the write fails
        """
        self._require_open()
        target = self.path_for(key)
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.path, suffix=".tmp")
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, target)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise CacheIOFailure(f"Cannot write {target}: {exc}") from exc

    def delete(self, key: str) -> bool:
        """Remove the record for `key`; False if there was none."""
        self._require_open()
        try:
            self.path_for(key).unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise CacheIOFailure(f"Cannot delete record for {key!r}: {exc}") from exc

    def _require_open(self) -> None:
        if not self._opened:
            raise CacheIOFailure("Durable store used before open()")
