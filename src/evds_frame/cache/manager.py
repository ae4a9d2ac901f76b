"""File-backed result cache keyed by call fingerprints."""

import hashlib
import logging
from pathlib import Path
from typing import Any, Optional, Union

import orjson

from ..errors import CacheError

logger = logging.getLogger(__name__)

CACHE_SUFFIX = ".cache"


class ResultCache:
    """Memoize opaque payloads (raw response bodies) on disk.

    Features:
    - One file per fingerprint under an explicit cache directory
    - Delimiter-safe fingerprints: arguments are JSON-array encoded before hashing
    - Entries never expire; put() overwrites unconditionally (last write wins)

    Known limitation: there is no locking. Two processes sharing a cache
    directory and fingerprint may race on put(), leaving either payload.
    """

    def __init__(self, cache_dir: Union[str, Path], verbose: bool = False):
        """
        Initialize ResultCache.

        Args:
            cache_dir: Directory to store cache files (created if missing)
            verbose: Log cache loads and saves at INFO instead of DEBUG
        """
        self.cache_dir = Path(cache_dir)
        self.verbose = verbose
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheError(f"Could not create cache directory {self.cache_dir}: {e}") from e

    def _log(self, message: str) -> None:
        logger.log(logging.INFO if self.verbose else logging.DEBUG, message)

    @staticmethod
    def fingerprint(operation: str, *args: Any) -> str:
        """
        Digest identifying a call by operation name and arguments.

        The name and arguments are encoded as one JSON array, so argument
        boundaries survive: ("ab", "c") and ("a", "bc") differ.

        Args:
            operation: Name of the cached operation
            *args: Call arguments; non-JSON values are encoded via str()

        Returns:
            SHA256 hex string
        """
        encoded = orjson.dumps([operation, *args], default=str)
        return hashlib.sha256(encoded).hexdigest()

    def path_for(self, fingerprint: str) -> Path:
        """Get the cache file path for a fingerprint."""
        return self.cache_dir / f"{fingerprint}{CACHE_SUFFIX}"

    def exists(self, fingerprint: str) -> bool:
        return self.path_for(fingerprint).is_file()

    def try_get(self, fingerprint: str) -> Optional[str]:
        """
        Load a cached payload.

        Args:
            fingerprint: Cache key from fingerprint()

        Returns:
            The payload, or None on a cache miss

        Raises:
            CacheError: If the entry exists but cannot be read
        """
        path = self.path_for(fingerprint)
        if not path.is_file():
            logger.debug(f"Cache miss for {fingerprint}")
            return None

        try:
            payload = path.read_bytes().decode("utf-8")
        except OSError as e:
            raise CacheError(f"Could not read cache file {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise CacheError(f"Could not decode cache file {path}: {e}") from e

        self._log(f"[loading cache] {path}")
        return payload

    def put(self, fingerprint: str, payload: str) -> Path:
        """
        Store a payload, replacing any existing entry.

        Args:
            fingerprint: Cache key from fingerprint()
            payload: Raw payload text

        Returns:
            Path of the written entry

        Raises:
            CacheError: If the entry cannot be written
        """
        path = self.path_for(fingerprint)
        try:
            path.write_bytes(payload.encode("utf-8"))
        except OSError as e:
            raise CacheError(f"Could not write cache file {path}: {e}") from e

        self._log(f"[saving cache] {path}")
        return path

    def invalidate(self, fingerprint: str) -> None:
        """Remove one entry; a missing entry is a no-op."""
        path = self.path_for(fingerprint)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise CacheError(f"Could not remove cache file {path}: {e}") from e

    def clear_all(self) -> int:
        """Remove every cache entry in the directory.

        Returns:
            Number of entries removed
        """
        removed = 0
        for path in self.cache_dir.glob(f"*{CACHE_SUFFIX}"):
            try:
                path.unlink()
            except OSError as e:
                raise CacheError(f"Could not remove cache file {path}: {e}") from e
            removed += 1
        logger.info(f"Cleared {removed} cache entries from {self.cache_dir}")
        return removed

    def storage_info(self) -> dict[str, Any]:
        """
        Get storage information.

        Returns:
            Storage information dictionary
        """
        entries = list(self.cache_dir.glob(f"*{CACHE_SUFFIX}"))
        return {
            "cache_dir": str(self.cache_dir),
            "entries": len(entries),
            "total_bytes": sum(p.stat().st_size for p in entries),
        }
