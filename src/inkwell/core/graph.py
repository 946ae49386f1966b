"""Versioned source/derived nodes with change subscriptions.

Source nodes hold mutable values. Derived nodes declare the exact nodes they
read and are recomputed lazily, only when one of those nodes has moved to a
new version since the last computation. A node's version bumps only when its
value actually changes, so an equal recomputation upstream does not ripple
further down.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Node(Generic[T]):
    key: str

    @property
    def version(self) -> int:
        raise NotImplementedError

    def get(self) -> T:
        raise NotImplementedError


class Source(Node[T]):
    def __init__(self, key: str, value: T):
        self.key = key
        self._value = value
        self._version = 0

    @property
    def version(self) -> int:
        return self._version

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> bool:
        """Store `value`; returns whether anything changed."""
        if value == self._value:
            return False
        self._value = value
        self._version += 1
        return True


class Derived(Node[T]):
    def __init__(self, key: str, deps: Sequence[Node[Any]], compute: Callable[..., T]):
        self.key = key
        self.deps = tuple(deps)
        self.compute = compute
        self.recomputations = 0
        self._seen: tuple[int, ...] | None = None
        self._value: T
        self._version = 0

    @property
    def version(self) -> int:
        self._refresh()
        return self._version

    def get(self) -> T:
        self._refresh()
        return self._value

    def _refresh(self) -> None:
        # Reading a derived dependency's version refreshes it first.
        seen = tuple(dep.version for dep in self.deps)
        if seen == self._seen:
            return

        value = self.compute(*(dep.get() for dep in self.deps))
        self.recomputations += 1
        first = self._seen is None
        self._seen = seen
        logger.debug("recomputed %s (deps %s)", self.key, seen)

        if not first and value == self._value:
            return
        self._value = value
        if not first:
            self._version += 1


@dataclass(eq=False)
class _Subscription:
    node: Node[Any]
    callback: Callable[[Any], None]
    seen: int


class Graph:
    """Owns the nodes and tells subscribers when a value they watch changes."""

    def __init__(self) -> None:
        self.nodes: dict[str, Node[Any]] = {}
        self._subs: list[_Subscription] = []
        self._batch_depth = 0
        self._dirty = False

    def source(self, key: str, value: T) -> Source[T]:
        node = Source(key, value)
        self._register(node)
        return node

    def derived(self, key: str, deps: Sequence[Node[Any]], compute: Callable[..., T]) -> Derived[T]:
        node: Derived[T] = Derived(key, deps, compute)
        self._register(node)
        return node

    def _register(self, node: Node[Any]) -> None:
        if node.key in self.nodes:
            raise ValueError(f"Duplicate node key: {node.key}")
        self.nodes[node.key] = node

    def set(self, node: Source[T], value: T) -> bool:
        changed = node.set(value)
        if changed:
            self._dirty = True
            if self._batch_depth == 0:
                self._notify()
        return changed

    @contextmanager
    def batch(self) -> Iterator[None]:
        """Group several `set` calls into one round of notifications."""
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self._notify()

    def subscribe(self, node: Node[T], callback: Callable[[T], None]) -> Callable[[], None]:
        """Call `callback(value)` whenever `node` changes. Returns an unsubscribe function."""
        sub = _Subscription(node=node, callback=callback, seen=node.version)
        self._subs.append(sub)

        def unsubscribe() -> None:
            if sub in self._subs:
                self._subs.remove(sub)

        return unsubscribe

    def _notify(self) -> None:
        self._dirty = False
        for sub in list(self._subs):
            version = sub.node.version
            if version != sub.seen:
                sub.seen = version
                sub.callback(sub.node.get())
