r"""TTL response cache for GitHub GET requests.

Responses are stored under ``cache_<url>`` keys as ``{data, timestamp}``
entries, where ``timestamp`` is the epoch time in milliseconds at which the
response was fetched. An entry is served while ``now - timestamp < ttl``.
Expired entries are not evicted eagerly; the next fetch simply overwrites
them.

Usage
-----
>>> import asyncio
>>> from pathlib import Path
>>> from issuepress.github.cache import CachedFetcher, FileResponseCache
>>> from issuepress.github.client import GitHubRestClient
>>>
>>> client = GitHubRestClient()
>>> fetcher = CachedFetcher(client.get_json, FileResponseCache(Path("cache.json")))
>>> user = asyncio.run(
...     fetcher.fetch("https://api.github.com/users/octocat", ttl_ms=3_600_000)
... )

"""

from __future__ import annotations

import asyncio
import collections.abc as cabc
import time
import typing as typ

import msgspec

from issuepress.logging import get_logger, log_debug, log_info, log_warning

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)

CACHE_KEY_PREFIX = "cache_"

JsonFetch = cabc.Callable[[str], cabc.Awaitable[typ.Any]]
Clock = cabc.Callable[[], int]


class CacheEntry(msgspec.Struct, kw_only=True):
    """A cached response payload and the time it was stored."""

    data: typ.Any
    timestamp: int

    def is_fresh(self, now_ms: int, ttl_ms: int) -> bool:
        """Return True while the entry is younger than ``ttl_ms``."""
        return now_ms - self.timestamp < ttl_ms


def cache_key(url: str) -> str:
    """Return the storage key for a request URL."""
    return f"{CACHE_KEY_PREFIX}{url}"


def epoch_millis() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


@typ.runtime_checkable
class ResponseCache(typ.Protocol):
    """Key/value storage for cache entries."""

    async def get(self, key: str) -> CacheEntry | None:
        """Return the entry stored under ``key``, if any."""
        ...

    async def set(self, key: str, entry: CacheEntry) -> None:
        """Store ``entry`` under ``key``, replacing any previous entry."""
        ...


class MemoryResponseCache:
    """In-process cache store, discarded when the process exits."""

    def __init__(self) -> None:
        """Initialise an empty store."""
        self._entries: dict[str, CacheEntry] = {}

    async def get(self, key: str) -> CacheEntry | None:
        """Return the entry stored under ``key``, if any."""
        return self._entries.get(key)

    async def set(self, key: str, entry: CacheEntry) -> None:
        """Store ``entry`` under ``key``."""
        self._entries[key] = entry

    def __len__(self) -> int:
        """Return the number of stored entries."""
        return len(self._entries)


_ENTRIES_DECODER = msgspec.json.Decoder(dict[str, CacheEntry])


class FileResponseCache:
    """Cache store persisted as a single JSON document on disk.

    The document maps ``cache_<url>`` keys to entries. Every write replaces
    the whole file through a temporary sibling so readers never observe a
    partial document. An unreadable or corrupt file is treated as empty.

    Parameters
    ----------
    path
        Location of the JSON document. Parent directories are created on
        first write.

    """

    def __init__(self, path: Path) -> None:
        """Initialise the store for ``path``."""
        self._path = path
        self._entries: dict[str, CacheEntry] | None = None
        self._write_lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        """Return the backing file path."""
        return self._path

    async def get(self, key: str) -> CacheEntry | None:
        """Return the entry stored under ``key``, if any."""
        entries = await self._load()
        return entries.get(key)

    async def set(self, key: str, entry: CacheEntry) -> None:
        """Store ``entry`` under ``key`` and persist the document."""
        entries = await self._load()
        entries[key] = entry
        # One writer at a time: every write goes through the same temp file.
        async with self._write_lock:
            payload = msgspec.json.encode(entries)
            await asyncio.to_thread(self._write, payload)

    async def _load(self) -> dict[str, CacheEntry]:
        if self._entries is None:
            loaded = await asyncio.to_thread(self._read)
            # A concurrent load may have finished first; keep its entries.
            if self._entries is None:
                self._entries = loaded
        return self._entries

    def _read(self) -> dict[str, CacheEntry]:
        if not self._path.exists():
            return {}
        try:
            return _ENTRIES_DECODER.decode(self._path.read_bytes())
        except (OSError, msgspec.DecodeError) as exc:
            log_warning(
                logger, "Ignoring unreadable response cache %s: %s", self._path, exc
            )
            return {}

    def _write(self, payload: bytes) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(f"{self._path.name}.tmp")
        try:
            tmp_path.write_bytes(payload)
            tmp_path.replace(self._path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise


class CachedFetcher:
    """Serve GitHub GET requests from a TTL cache, fetching on a miss.

    There is no retry or backoff: a failed request raises straight to the
    caller and nothing is cached for it.

    Parameters
    ----------
    fetch
        Coroutine function performing the network GET and returning decoded
        JSON, usually :meth:`GitHubRestClient.get_json`.
    cache
        Entry store.
    clock
        Returns the current time in epoch milliseconds.

    """

    def __init__(
        self,
        fetch: JsonFetch,
        cache: ResponseCache,
        *,
        clock: Clock = epoch_millis,
    ) -> None:
        """Initialise the fetcher with its network function, store and clock."""
        self._fetch = fetch
        self._cache = cache
        self._clock = clock

    async def fetch(self, url: str, *, ttl_ms: int) -> typ.Any:  # noqa: ANN401
        """Return the JSON payload for ``url``, preferring a fresh cached copy."""
        key = cache_key(url)
        cached = await self._cache.get(key)
        if cached is not None and cached.is_fresh(self._clock(), ttl_ms):
            log_debug(logger, "[Cache Hit] %s", url)
            return cached.data

        log_info(logger, "[Network Request] %s", url)
        data = await self._fetch(url)
        await self._cache.set(key, CacheEntry(data=data, timestamp=self._clock()))
        return data
