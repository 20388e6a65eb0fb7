"""A tracing garbage collector that hands out opaque handles to stored values."""

from __future__ import annotations

import enum
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from typing import Any, Iterable

_log = logging.getLogger(__name__)

_heap_ids = itertools.count(1)
_heap_ids_lock = threading.Lock()


class Strategy(enum.Enum):
    """When a heap runs a collection on its own."""

    DISABLED = "disabled"
    DEFAULT = "default"
    AGGRESSIVE = "aggressive"
    CHECKING = "checking"


@dataclass(frozen=True)
class Handle:
    """An opaque reference to a value stored in a particular heap."""

    heap: int
    index: int


class Traceable(ABC):
    """A value that may hold handles to other values in the same heap."""

    @abstractmethod
    def trace(self) -> Iterable[Handle]:
        """Return the handles this value refers to."""


class Heap:
    """Owns values and frees those no longer reachable from a root."""

    def __init__(self, strategy: Strategy = Strategy.DEFAULT) -> None:
        self.strategy = strategy
        self.objects: dict[Handle, Any] = {}
        self.roots: dict[Handle, int] = {}
        self._indices = itertools.count(1)
        self._capacity = 0
        with _heap_ids_lock:
            self.id = next(_heap_ids)

    def __len__(self) -> int:
        return len(self.objects)

    def __contains__(self, handle: object) -> bool:
        return handle in self.objects

    def alloc(self, value: Any) -> Handle:
        """Store a value without rooting it and return its handle."""
        if self.strategy in (Strategy.AGGRESSIVE, Strategy.CHECKING):
            self.collect()
        elif self.strategy is Strategy.DEFAULT and len(self.objects) == self._capacity:
            self.collect()
        handle = Handle(self.id, next(self._indices))
        self.objects[handle] = value
        return handle

    def rooted(self, value: Any) -> Handle:
        """Store a value and root it once."""
        return self.root(self.alloc(value))

    def _check(self, handle: Handle) -> None:
        if handle.heap != self.id:
            raise ValueError(f"handle {handle} belongs to another heap")

    def get(self, handle: Handle) -> Any:
        """Return the value behind a handle."""
        self._check(handle)
        try:
            return self.objects[handle]
        except KeyError:
            raise KeyError(f"handle {handle} has been collected") from None

    def root(self, handle: Handle) -> Handle:
        """Keep a handle alive across collections; roots are counted."""
        self.roots[handle] = self.roots.get(handle, 0) + 1
        return handle

    def unroot(self, handle: Handle) -> None:
        """Drop one root of a handle."""
        count = self.roots.get(handle)
        if count is None:
            if self.strategy is Strategy.CHECKING:
                raise ValueError(f"handle {handle} is not rooted")
            return
        if count == 1:
            del self.roots[handle]
        else:
            self.roots[handle] = count - 1

    def collect(self) -> None:
        """Free every value not reachable from a root."""
        if self.strategy is Strategy.CHECKING:
            _log.debug("collecting")
        reachable = set(self.roots)
        queue = deque(self.roots)
        while queue:
            value = self.get(queue.popleft())
            if not isinstance(value, Traceable):
                continue
            for child in value.trace():
                self.get(child)
                if child not in reachable:
                    reachable.add(child)
                    queue.append(child)
        self.objects = {h: v for h, v in self.objects.items() if h in reachable}
        self._capacity = len(self.objects) * 2 + 1