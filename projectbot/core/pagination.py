# projectbot/core/pagination.py
"""Client-side pagination over an already fetched and sorted result set."""

import math
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from projectbot.core.models import PageCursor

PAGE_SIZE = 8

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One window of a result set.

    Attributes:
        items: Records in this window.
        page: Zero-based page index.
        total: Size of the full result set.
        start: Zero-based index of the first item in the window.
        end: Exclusive index of the last item in the window.
    """

    items: list[T]
    page: int
    total: int
    start: int
    end: int
    page_size: int = PAGE_SIZE

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    @property
    def has_next(self) -> bool:
        return self.page_size * (self.page + 1) < self.total

    def summary(self) -> str:
        return (
            f"_Showing {self.start + 1}-{self.end} of {self.total} projects "
            f"(Page {self.page + 1} of {self.total_pages})_"
        )


def paginate(items: list[T], page: int, page_size: int = PAGE_SIZE) -> Page[T]:
    """Slice ``items`` to the window for ``page``.

    Page ``p`` covers ``[p * page_size, min(p * page_size + page_size, N))``.
    A page past the end yields an empty window.
    """
    if page < 0:
        raise ValueError(f"page must be >= 0, got {page}")
    total = len(items)
    start = page * page_size
    end = min(start + page_size, total)
    return Page(
        items=items[start:end],
        page=page,
        total=total,
        start=start,
        end=max(end, start),
        page_size=page_size,
    )


def navigation_block(
    page: Page[Any],
    cursor: PageCursor,
    prev_action_id: str,
    next_action_id: str,
) -> dict[str, Any] | None:
    """Build the Previous/Next actions block for a page.

    Each button value is the cursor re-pointed at the adjacent page, so a
    click is a self-contained request.

    Returns:
        An ``actions`` block, or None when neither control applies.
    """
    elements = []
    if page.has_previous:
        elements.append(
            {
                "type": "button",
                "text": {"type": "plain_text", "text": "◀ Previous"},
                "action_id": prev_action_id,
                "value": cursor.at(page.page - 1).serialize(),
            }
        )
    if page.has_next:
        elements.append(
            {
                "type": "button",
                "text": {"type": "plain_text", "text": "Next ▶"},
                "action_id": next_action_id,
                "value": cursor.at(page.page + 1).serialize(),
            }
        )
    if not elements:
        return None
    return {"type": "actions", "elements": elements}
