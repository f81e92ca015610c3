from __future__ import annotations

"""Batch paginator: fixed-size pages over the session order.

The paginator only answers questions about bounds. The per-page completion
gate on forward navigation belongs to the session manager.
"""

from dataclasses import dataclass
from typing import List, Sequence, TypeVar

PAGE_SIZE = 50

T = TypeVar("T")


@dataclass(frozen=True)
class BatchPaginator:
    page_size: int = PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError("page_size must be >= 1")

    def page_count(self, total: int) -> int:
        if total <= 0:
            return 1
        return (total + self.page_size - 1) // self.page_size

    def positions(self, batch_index: int, total: int) -> range:
        start = batch_index * self.page_size
        return range(min(start, total), min(start + self.page_size, total))

    def current_page(self, order: Sequence[T], batch_index: int) -> List[T]:
        start = batch_index * self.page_size
        return list(order[start:start + self.page_size])

    def has_next(self, batch_index: int, total: int) -> bool:
        return (batch_index + 1) * self.page_size < total

    def has_previous(self, batch_index: int) -> bool:
        return batch_index > 0

    def clamp(self, batch_index: int, total: int) -> int:
        return max(0, min(int(batch_index), self.page_count(total) - 1))
