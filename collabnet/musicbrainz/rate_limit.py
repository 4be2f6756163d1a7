"""Throttling and caching for the MusicBrainz web service.

MusicBrainz asks anonymous clients for at most one request per second, and
edge verification fans out into dozens of lookups. This module provides:

    - ``MinIntervalThrottle``: enforces a minimum gap between requests
    - ``DiskCache``: JSON-on-disk cache with a maximum age, surviving restarts

Both are plain objects owned by whoever makes the requests; there is no
process-wide state.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
import time
from pathlib import Path
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Minimum-interval throttle
# ---------------------------------------------------------------------------


class MinIntervalThrottle:
    """Space out calls so consecutive ones are at least ``min_interval`` apart.

    Parameters
    ----------
    min_interval:
        Minimum seconds between the starts of two requests.
    clock, sleep:
        Injectable time source and sleeper, for tests.

    Usage::

        throttle = MinIntervalThrottle(min_interval=1.2)
        await throttle.wait()  # blocks if the previous call was too recent
        # ... make API call ...
    """

    def __init__(
        self,
        min_interval: float = 1.2,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_call: float | None = None
        self._lock = asyncio.Lock()

    @property
    def min_interval(self) -> float:
        return self._min_interval

    async def wait(self) -> float:
        """Wait until a request may be made. Returns the seconds slept."""
        async with self._lock:
            waited = 0.0
            if self._last_call is not None:
                remaining = self._min_interval - (self._clock() - self._last_call)
                if remaining > 0:
                    logger.debug("Throttling MusicBrainz request for %.2fs", remaining)
                    await self._sleep(remaining)
                    waited = remaining
            self._last_call = self._clock()
            return waited


# ---------------------------------------------------------------------------
# Disk cache
# ---------------------------------------------------------------------------

_UNSAFE_KEY_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


class DiskCache:
    """JSON file cache with a maximum entry age.

    Entries are single files named after the sanitised key; age is the
    file's modification time. I/O failures never propagate: a failed read
    is a miss and a failed write is skipped.

    Parameters
    ----------
    directory:
        Where cache files live. Created on first write.
    max_age:
        Seconds after which an entry is considered stale.
    """

    def __init__(
        self,
        directory: str | Path,
        max_age: float = 7 * 24 * 3600.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._directory = Path(directory)
        self._max_age = max_age
        self._clock = clock
        self._hit_count = 0
        self._miss_count = 0

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        return self._directory / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if missing, stale or unreadable."""
        path = self.path_for(key)
        try:
            age = self._clock() - path.stat().st_mtime
            if age > self._max_age:
                self._miss_count += 1
                return None
            value = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            self._miss_count += 1
            return None
        except (OSError, ValueError) as e:
            logger.debug("Cache read failed for %s: %s", key, e)
            self._miss_count += 1
            return None
        self._hit_count += 1
        return value

    def set(self, key: str, value: Any) -> None:
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            self.path_for(key).write_text(json.dumps(value), encoding="utf-8")
        except (OSError, TypeError) as e:
            logger.debug("Cache write failed for %s: %s", key, e)

    def clear(self) -> int:
        """Delete every cache file. Returns the count removed."""
        removed = 0
        if not self._directory.is_dir():
            return 0
        for path in self._directory.glob("*.json"):
            try:
                path.unlink()
                removed += 1
            except OSError as e:
                logger.debug("Could not remove %s: %s", path, e)
        return removed

    @property
    def stats(self) -> dict[str, Any]:
        """Cache performance stats."""
        total = self._hit_count + self._miss_count
        return {
            "directory": str(self._directory),
            "max_age": self._max_age,
            "hits": self._hit_count,
            "misses": self._miss_count,
            "hit_rate": round(self._hit_count / total, 3) if total > 0 else 0.0,
        }
