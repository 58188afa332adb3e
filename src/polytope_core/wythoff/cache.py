"""
Construction Cache
==================

Two tiers, keyed by WythoffConfig.cache_key(dimension):

    memory   insertion-ordered dict, FIFO eviction at `capacity`,
             guarded by an RLock, consulted synchronously
    durable  DurablePolytopeStore of encoded binary records, touched only
             from one background I/O thread

SCALE INDEPENDENCE:
    Entries are stored at scale 1.0. apply_scale() produces the requested
    size on every retrieval, so one entry serves every scale. Callers get a
    copy; only the read-only vertex array may be shared with the entry.

DURABLE TIER:
    The store is opened once. The open runs as the first task on the I/O
    executor and its Future is shared by every caller (created under the
    lock), so concurrent requests see the same outcome. An unavailable
    store logs a warning and the cache continues memory-only.

    Writes are fire-and-forget: put() returns immediately, failures are
    logged. Reads block the calling thread on the I/O executor, so they
    must never be issued FROM the I/O thread.

    Corrupt records (DataCorruptionError) are logged and treated as misses.

COUNTERS:
    hits          memory hits
    durable_hits  memory miss, durable hit
    misses        not found in any tier consulted
    stores        put() calls
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from ..spec.constants import MAX_CACHE_SIZE, EPS_SCALE
from ..spec.errors import CacheIOFailure, DataCorruptionError
from ..spec.structures import copy_polytope, with_vertices
from .serialization import serialize_to_binary, deserialize_from_binary, encode_record, decode_record
from .store import DurablePolytopeStore

logger = logging.getLogger(__name__)


def apply_scale(polytope: dict, scale: float) -> dict:
    """
    Polytope scaled about the origin.

    Always a new dict whose lists and metadata can be edited without touching
    the cached entry. When |scale - 1| < EPS_SCALE the read-only vertex
    array is shared instead of copied.
    """
    scale = float(scale)
    if abs(scale - 1.0) < EPS_SCALE:
        return copy_polytope(polytope)
    return with_vertices(polytope, polytope['V'] * scale, {'applied_scale': scale})


class ConstructionCache:
    """
    Memory + durable cache for scale-1.0 polytopes.

    Args:
        store: durable tier; None for memory-only
        capacity: maximum in-memory entries
    """

    def __init__(self, store: Optional[DurablePolytopeStore] = None, capacity: int = MAX_CACHE_SIZE):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = int(capacity)
        self.store = store

        self._memory = {}
        self._lock = threading.RLock()
        self._io = None
        self._store_future = None

        self.hits = 0
        self.misses = 0
        self.durable_hits = 0
        self.stores = 0

    # -------------------------------------------------------------------------
    # Memory tier
    # -------------------------------------------------------------------------

    def _remember(self, key: str, polytope: dict) -> None:
        with self._lock:
            if key in self._memory:
                self._memory[key] = polytope
                return
            while len(self._memory) >= self.capacity:
                oldest = next(iter(self._memory))
                del self._memory[oldest]
                logger.debug("Evicted %s from memory cache", oldest)
            self._memory[key] = polytope

    def get_memory(self, key: str) -> Optional[dict]:
        """Memory tier only; never touches the durable store."""
        with self._lock:
            polytope = self._memory.get(key)
            if polytope is None:
                self.misses += 1
            else:
                self.hits += 1
            return polytope

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._memory

    def __len__(self) -> int:
        with self._lock:
            return len(self._memory)

    def clear_memory(self) -> None:
        with self._lock:
            self._memory.clear()

    def reset_counters(self) -> None:
        with self._lock:
            self.hits = self.misses = self.durable_hits = self.stores = 0

    # -------------------------------------------------------------------------
    # Durable tier
    # -------------------------------------------------------------------------

    def _io_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._io is None:
                self._io = ThreadPoolExecutor(max_workers=1, thread_name_prefix="polytope-store")
            return self._io

    def durable_store(self) -> Future:
        """
        Future resolving to the opened store, or None if unavailable.

        Created once; every caller gets the same Future.
        """
        with self._lock:
            if self._store_future is None:
                if self.store is None:
                    self._store_future = Future()
                    self._store_future.set_result(None)
                else:
                    self._store_future = self._io_executor().submit(self._open_store)
            return self._store_future

    def _open_store(self) -> Optional[DurablePolytopeStore]:
        try:
            return self.store.open()
        except CacheIOFailure as exc:
            logger.warning("Durable cache unavailable, using memory only: %s", exc)
            return None

    def _read_durable(self, store: DurablePolytopeStore, key: str) -> Optional[dict]:
        try:
            data = store.get(key)
        except CacheIOFailure as exc:
            logger.warning("Durable cache read failed: %s", exc)
            return None
        if data is None:
            return None

        try:
            return deserialize_from_binary(decode_record(data))
        except DataCorruptionError as exc:
            logger.warning("Discarding corrupt durable record %s: %s", store.path_for(key).name, exc)
            return None

    def _write_durable(self, store_future: Future, key: str, polytope: dict) -> None:
        # The open task was queued first on the same single-thread executor
        store = store_future.result()
        if store is None:
            return
        try:
            store.set(key, encode_record(serialize_to_binary(polytope)))
        except CacheIOFailure as exc:
            logger.warning("Durable cache write failed: %s", exc)

    @staticmethod
    def _log_unexpected(future: Future) -> None:
        exc = future.exception()
        if exc is not None:
            logger.error("Durable cache task failed", exc_info=exc)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def get_cached(self, key: str) -> Optional[dict]:
        """
        Memory tier, then durable tier (blocking).

        A durable hit is copied into the memory tier. Must not be called
        from the store's I/O thread.
        """
        with self._lock:
            polytope = self._memory.get(key)
            if polytope is not None:
                self.hits += 1
                return polytope

        store = self.durable_store().result()
        if store is not None:
            polytope = self._io_executor().submit(self._read_durable, store, key).result()
            if polytope is not None:
                self._remember(key, polytope)
                with self._lock:
                    self.durable_hits += 1
                logger.debug("Durable cache hit for %s", key)
                return polytope

        with self._lock:
            self.misses += 1
        return None

    def put(self, key: str, polytope: dict) -> None:
        """Store in memory now; queue a durable write (fire-and-forget)."""
        self._remember(key, polytope)
        with self._lock:
            self.stores += 1

        if self.store is not None:
            store_future = self.durable_store()
            task = self._io_executor().submit(self._write_durable, store_future, key, polytope)
            task.add_done_callback(self._log_unexpected)

    def flush(self) -> None:
        """Block until every queued durable task has finished."""
        with self._lock:
            io = self._io
        if io is not None:
            io.submit(lambda: None).result()

    def close(self) -> None:
        """Finish pending durable writes and stop the I/O thread."""
        with self._lock:
            io, self._io = self._io, None
            self._store_future = None
        if io is not None:
            io.shutdown(wait=True)
