"""
Snapshot Cache - Bounded memoization for parsed documents and selectors

Owned by a Tinyshot instance (or shared between instances explicitly).
Nothing here affects output: a disabled cache only costs latency.

Usage:
    from tinyshot_core.cache import SnapshotCache

    cache = SnapshotCache(ttl=300, max_size=100)
    tinyshot = Tinyshot(cache=cache)

Document keys are a cheap 32-bit rolling hash over the first
``fingerprint_chars`` characters of the HTML. Pages sharing a long common
prefix collide, so every entry also keeps its source and a hit is only
returned when the source matches exactly.
"""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

logger = logging.getLogger(__name__)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    value = abs(value)
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return sign + "".join(reversed(digits))


def fingerprint(html: str, limit: int = 1000) -> str:
    """
    Non-cryptographic fingerprint of an HTML prefix.

    ``h = h * 31 + code`` wrapped to a signed 32-bit integer, rendered base36.
    """
    h = 0
    for ch in html[:limit]:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 0x100000000
    return _to_base36(h)


@dataclass
class _DocumentEntry:
    source: str
    document: Any
    created: float


class SnapshotCache:
    """
    Document + selector cache with TTL sweep and capacity bound.

    Thread-safe: all map mutations happen under one lock.
    """

    def __init__(
        self,
        ttl: float = 300.0,
        max_size: int = 100,
        fingerprint_chars: int = 1000,
        enabled: bool = True,
        selector_max_size: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize cache.

        Args:
            ttl: Seconds between sweeps; documents older than this are stale
            max_size: Maximum number of cached documents
            fingerprint_chars: HTML prefix length hashed for document keys
            enabled: When False nothing is stored and every lookup misses
            selector_max_size: Maximum cached selectors (default 10x max_size)
            clock: Monotonic time source (injectable for tests)
        """
        self.ttl = ttl
        self.max_size = max_size
        self.fingerprint_chars = fingerprint_chars
        self.enabled = enabled
        self.selector_max_size = selector_max_size or max_size * 10
        self._clock = clock
        self._lock = threading.Lock()
        self._documents: "OrderedDict[str, _DocumentEntry]" = OrderedDict()
        self._selectors: Dict[Hashable, Any] = {}
        self._last_sweep = clock()
        self.hits = 0
        self.misses = 0

    def fingerprint(self, html: str) -> str:
        return fingerprint(html, self.fingerprint_chars)

    # Documents

    def get_document(self, html: str) -> Optional[Any]:
        if not self.enabled:
            return None
        key = self.fingerprint(html)
        with self._lock:
            entry = self._documents.get(key)
            if entry is not None and entry.source == html:
                self.hits += 1
                return entry.document
            if entry is not None:
                logger.debug(f"Fingerprint collision on {key}, treating as miss")
            self.misses += 1
            return None

    def put_document(self, html: str, document: Any) -> None:
        if not self.enabled:
            return
        key = self.fingerprint(html)
        with self._lock:
            if key in self._documents:
                # Collision replacement goes to the back of the eviction order
                del self._documents[key]
            elif len(self._documents) >= self.max_size:
                return
            self._documents[key] = _DocumentEntry(html, document, self._clock())

    # Selectors

    def get_selector(self, key: Hashable) -> Optional[Any]:
        if not self.enabled:
            return None
        with self._lock:
            return self._selectors.get(key)

    def put_selector(self, key: Hashable, value: Any) -> None:
        if not self.enabled:
            return
        with self._lock:
            if key in self._selectors or len(self._selectors) < self.selector_max_size:
                self._selectors[key] = value

    # Eviction

    def maybe_sweep(self) -> bool:
        """Sweep if more than ``ttl`` seconds passed since the last sweep."""
        if self._clock() - self._last_sweep > self.ttl:
            self.sweep()
            return True
        return False

    def sweep(self) -> None:
        """
        Drop stale documents, halve the document cache when full,
        clear all selectors.
        """
        with self._lock:
            now = self._clock()
            stale = [k for k, e in self._documents.items() if now - e.created > self.ttl]
            for key in stale:
                del self._documents[key]

            evicted = 0
            if len(self._documents) >= self.max_size:
                evicted = len(self._documents) // 2
                for _ in range(evicted):
                    self._documents.popitem(last=False)

            selectors = len(self._selectors)
            self._selectors.clear()
            self._last_sweep = now

        logger.debug(
            f"Cache sweep: {len(stale)} stale, {evicted} evicted, "
            f"{selectors} selectors cleared"
        )

    def clear(self) -> None:
        with self._lock:
            self._documents.clear()
            self._selectors.clear()
            self.hits = 0
            self.misses = 0
            self._last_sweep = self._clock()

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "documents": len(self._documents),
                "selectors": len(self._selectors),
                "hits": self.hits,
                "misses": self.misses,
            }

    def __len__(self) -> int:
        return len(self._documents)
