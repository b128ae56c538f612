from __future__ import annotations
from dataclasses import dataclass


@dataclass
class CallIdAllocator:
    """Hands out call ids 1, 2, 3, ... for one bridge. Ids are never reused."""

    _last: int = 0

    def next(self) -> int:
        self._last += 1
        return self._last

    @property
    def last(self) -> int:
        """Most recently issued id (0 before the first call)."""
        return self._last
