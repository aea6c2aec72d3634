from __future__ import annotations

from typing import Any, Callable, Dict, Hashable, Optional

import dataclasses
import json
import logging
import threading
import time

import cachetools

from oktasdk.exceptions import InvalidArgument

log = logging.getLogger(__name__)


class Cache:
    name: str

    def get(self, key: Hashable) -> Any:
        raise NotImplementedError

    def put(self, key: Hashable, value: Any) -> Any:
        raise NotImplementedError

    def remove(self, key: Hashable) -> Any:
        raise NotImplementedError


class CacheManager:

    def get_cache(self, name: str) -> Cache:
        raise NotImplementedError


class DisabledCache(Cache):

    def __init__(self, name: str = 'disabled'):
        self.name = name

    def get(self, key):
        return None

    def put(self, key, value):
        return None

    def remove(self, key):
        return None


class DisabledCacheManager(CacheManager):
    """Cache manager used when caching is turned off.

    Every region it hands out silently ignores writes and never hits.
    """

    def get_cache(self, name: str) -> Cache:
        return DisabledCache(name)


@dataclasses.dataclass
class _Entry:
    value: Any
    created: float
    accessed: float


class DefaultCache(Cache):
    """In-memory cache region with time-to-live and time-to-idle eviction.

    Entries older than `ttl` seconds, or not read for longer than `tti`
    seconds, are dropped on the next read. An expired read counts as a miss.
    """

    def __init__(
        self,
        name: str,
        ttl: Optional[float] = None,
        tti: Optional[float] = None,
        max_size: int = 1000,
        timer: Callable[[], float] = time.monotonic,
    ):
        _check_duration('ttl', ttl)
        _check_duration('tti', tti)
        self.name = name
        self.ttl = ttl
        self.tti = tti
        self.max_size = max_size
        self.timer = timer
        if ttl is None:
            self._map = cachetools.LRUCache(maxsize=max_size)
        else:
            self._map = cachetools.TTLCache(maxsize=max_size, ttl=ttl, timer=timer)
        self._lock = threading.Lock()
        self.access_count = 0
        self.hit_count = 0
        self.miss_count = 0

    def get(self, key):
        with self._lock:
            self.access_count += 1
            entry: Optional[_Entry] = self._map.get(key)
            if entry is None:
                self.miss_count += 1
                return None
            now = self.timer()
            if self.tti is not None and now - entry.accessed > self.tti:
                log.debug("Removing %s from %s cache due to TTI.", key, self.name)
                del self._map[key]
                self.miss_count += 1
                return None
            entry.accessed = now
            self.hit_count += 1
            return entry.value

    def put(self, key, value):
        with self._lock:
            now = self.timer()
            previous = self._map.get(key)
            self._map[key] = _Entry(value, now, now)
            return previous.value if previous is not None else None

    def remove(self, key):
        with self._lock:
            self.access_count += 1
            previous = self._map.pop(key, None)
            if previous is None:
                self.miss_count += 1
                return None
            self.hit_count += 1
            return previous.value

    def clear(self):
        with self._lock:
            self._map.clear()

    def __len__(self):
        return len(self._map)

    @property
    def hit_ratio(self) -> float:
        if self.access_count > 0:
            return self.hit_count / self.access_count
        return 0.0

    def stats(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'size': len(self),
            'accessCount': self.access_count,
            'hitCount': self.hit_count,
            'missCount': self.miss_count,
            'hitRatio': self.hit_ratio,
        }

    def __str__(self):
        return json.dumps(self.stats(), indent=2)


class DefaultCacheManager(CacheManager):
    """Hands out named `DefaultCache` regions, creating them on demand.

    `caches` maps region names to `{'ttl': ..., 'tti': ...}` overrides of
    the default durations.
    """

    def __init__(
        self,
        default_ttl: Optional[float] = None,
        default_tti: Optional[float] = None,
        max_size: int = 1000,
        caches: Optional[Dict[str, Dict[str, Any]]] = None,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = default_ttl
        self.default_tti = default_tti
        self.max_size = max_size
        self.configs = caches or {}
        self.timer = timer
        self._caches: Dict[str, DefaultCache] = {}
        self._lock = threading.Lock()

    def get_cache(self, name: str) -> DefaultCache:
        with self._lock:
            cache = self._caches.get(name)
            if cache is None:
                config = self.configs.get(name, {})
                cache = DefaultCache(
                    name,
                    ttl=_seconds(config.get('ttl', self.default_ttl)),
                    tti=_seconds(config.get('tti', self.default_tti)),
                    max_size=self.max_size,
                    timer=self.timer,
                )
                self._caches[name] = cache
            return cache

    @property
    def caches(self) -> Dict[str, DefaultCache]:
        return dict(self._caches)

    def __str__(self):
        return json.dumps({
            'cacheCount': len(self._caches),
            'defaultTimeToLive': self.default_ttl,
            'defaultTimeToIdle': self.default_tti,
            'caches': [c.stats() for c in self._caches.values()],
        }, indent=2)


def _seconds(value: Any) -> Optional[float]:
    if value is None or value == '':
        return None
    return float(value)


def _check_duration(name: str, value: Optional[float]):
    if value is not None and value <= 0:
        raise InvalidArgument(reason=f"{name} duration must be greater than zero")
