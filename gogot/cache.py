"""Bounded adaptive replacement cache for resolved import paths.

The cache follows the ARC policy (Megiddo and Modha): resident entries live
in ``T1`` (seen once) or ``T2`` (seen at least twice), and the keys of
recently evicted entries are remembered in the ghost lists ``B1`` and ``B2``.
A ghost hit moves the adaptive target ``p`` for the size of ``T1`` towards
whichever list would have kept the key, so the cache drifts between recency
and frequency as the workload changes. A burst of one-off paths only churns
``T1`` and leaves the frequently requested namespaces in ``T2`` alone.

Usage
-----
>>> cache = AdaptiveReplacementCache[str, int](2)
>>> cache.put("group/project", 1)
>>> cache.get("group/project")
1
>>> cache.invalidate("group/project")
True
>>> cache.get("group/project") is None
True

"""

from __future__ import annotations

import collections
import collections.abc as cabc
import threading

from gogot.gitlab.models import RepositoryRecord

__all__ = ["DEFAULT_CAPACITY", "AdaptiveReplacementCache", "ProjectCache"]

DEFAULT_CAPACITY = 512


class AdaptiveReplacementCache[K: cabc.Hashable, V]:
    """Thread-safe ARC mapping keys to values with a fixed capacity.

    Every public method takes one lock for a constant amount of work and
    never performs I/O, so callers on the event loop may use it directly.

    Parameters
    ----------
    capacity
        Maximum number of resident entries. Must be at least 1.

    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        """Create an empty cache holding at most ``capacity`` entries."""
        if capacity < 1:
            msg = f"cache capacity must be positive, got: {capacity}"
            raise ValueError(msg)
        self._capacity = capacity
        self._target = 0
        self._t1: collections.OrderedDict[K, V] = collections.OrderedDict()
        self._t2: collections.OrderedDict[K, V] = collections.OrderedDict()
        self._b1: collections.OrderedDict[K, None] = collections.OrderedDict()
        self._b2: collections.OrderedDict[K, None] = collections.OrderedDict()
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        """Return the maximum number of resident entries."""
        return self._capacity

    @property
    def recency_target(self) -> int:
        """Return the adaptive target size of the seen-once list."""
        with self._lock:
            return self._target

    def __len__(self) -> int:
        """Return the number of resident entries."""
        with self._lock:
            return len(self._t1) + len(self._t2)

    def __contains__(self, key: object) -> bool:
        """Report residency without touching recency or frequency."""
        with self._lock:
            return key in self._t1 or key in self._t2

    def get(self, key: K) -> V | None:
        """Return the value for ``key`` and record the hit, or ``None``."""
        with self._lock:
            if key in self._t1:
                value = self._t1.pop(key)
                self._t2[key] = value
                return value
            if key in self._t2:
                self._t2.move_to_end(key)
                return self._t2[key]
            return None

    def put(self, key: K, value: V) -> None:
        """Insert or overwrite ``key``, evicting if the cache is full."""
        with self._lock:
            if key in self._t1:
                del self._t1[key]
                self._t2[key] = value
                return
            if key in self._t2:
                self._t2[key] = value
                self._t2.move_to_end(key)
                return

            if key in self._b1:
                delta = max(1, len(self._b2) // len(self._b1))
                self._target = min(self._target + delta, self._capacity)
                if self._resident_count() >= self._capacity:
                    self._replace(in_b2=False)
                del self._b1[key]
                self._t2[key] = value
                return

            if key in self._b2:
                delta = max(1, len(self._b1) // len(self._b2))
                self._target = max(self._target - delta, 0)
                if self._resident_count() >= self._capacity:
                    self._replace(in_b2=True)
                del self._b2[key]
                self._t2[key] = value
                return

            if self._resident_count() >= self._capacity:
                self._replace(in_b2=False)
            if len(self._b1) > self._capacity - self._target:
                self._b1.popitem(last=False)
            if len(self._b2) > self._target:
                self._b2.popitem(last=False)
            self._t1[key] = value

    def invalidate(self, key: K) -> bool:
        """Drop ``key`` and its ghost history; return whether it was resident."""
        with self._lock:
            self._b1.pop(key, None)
            self._b2.pop(key, None)
            if key in self._t1:
                del self._t1[key]
                return True
            if key in self._t2:
                del self._t2[key]
                return True
            return False

    def clear(self) -> None:
        """Forget every entry, ghost and the learned target."""
        with self._lock:
            self._t1.clear()
            self._t2.clear()
            self._b1.clear()
            self._b2.clear()
            self._target = 0

    def _resident_count(self) -> int:
        return len(self._t1) + len(self._t2)

    def _replace(self, *, in_b2: bool) -> None:
        """Evict one resident entry into its ghost list. Caller holds the lock."""
        t1_len = len(self._t1)
        if t1_len > 0 and (
            not self._t2
            or t1_len > self._target
            or (t1_len == self._target and in_b2)
        ):
            evicted, _ = self._t1.popitem(last=False)
            self._remember(self._b1, evicted)
        else:
            evicted, _ = self._t2.popitem(last=False)
            self._remember(self._b2, evicted)

    def _remember(self, ghosts: collections.OrderedDict[K, None], key: K) -> None:
        ghosts[key] = None
        ghosts.move_to_end(key)
        while len(ghosts) > self._capacity:
            ghosts.popitem(last=False)


class ProjectCache(AdaptiveReplacementCache[str, RepositoryRecord]):
    """ARC keyed by normalised request path holding resolved projects."""
