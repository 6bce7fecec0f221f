"""A hash map from label names to their branch targets."""

from __future__ import annotations

from typing import Any


class DuplicateLabelError(ValueError):
    """Raised when a label is defined more than once."""


def _hash(label: str) -> int:
    return sum(ord(ch) for ch in label)


class LabelMap:
    """Chained hash map of labels, bucketed by the sum of their characters."""

    def __init__(self, capacity: int = 100) -> None:
        if capacity <= 0:
            raise ValueError("label map capacity must be positive")
        self.capacity = capacity
        self._buckets: list[list[tuple[str, Any]]] = [[] for _ in range(capacity)]
        self._count = 0

    def _bucket(self, label: str) -> list[tuple[str, Any]]:
        return self._buckets[_hash(label) % self.capacity]

    def put(self, label: str, target: Any) -> None:
        """Bind ``label`` to ``target``; the target may be None."""
        bucket = self._bucket(label)
        if any(name == label for name, _ in bucket):
            raise DuplicateLabelError(f"Label already defined: {label}")
        bucket.append((label, target))
        self._count += 1

    def get(self, label: str) -> Any:
        """Return the target bound to ``label``; raise KeyError if unbound."""
        for name, target in self._bucket(label):
            if name == label:
                return target
        raise KeyError(label)

    def __contains__(self, label: object) -> bool:
        if not isinstance(label, str):
            return False
        return any(name == label for name, _ in self._bucket(label))

    def __len__(self) -> int:
        return self._count