"""
Topic list page sizing.
"""

import math
from dataclasses import dataclass
from typing import Any

# Largest value the store accepts in an INTEGER column
MAX_STORE_INT = 2**63 - 1


@dataclass(frozen=True)
class PaginationSpec:
    """Resolved page window over a list of items."""

    page: int
    effective_page_size: int
    total_items: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.effective_page_size)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.effective_page_size

    @property
    def limit(self) -> int:
        return min(self.effective_page_size, MAX_STORE_INT)

    @property
    def is_past_end(self) -> bool:
        """True when the window selects nothing."""
        return self.offset >= self.total_items


def positive_int(value: Any, maximum: int | None = None) -> int | None:
    """Coerce a loosely typed parameter to a positive int, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    if number <= 0 or (maximum is not None and number > maximum):
        return None
    return number


def positive_id(value: Any) -> int | None:
    """Coerce a row id; values the store cannot hold are no id at all."""
    return positive_int(value, MAX_STORE_INT)


def resolve_page_size(
    global_default_size: int,
    forum_override: int | None = None,
    caller_requested_size: int | None = None,
) -> int:
    """Caller value, then forum override, then the board default."""
    for candidate in (caller_requested_size, forum_override):
        size = positive_int(candidate)
        if size is not None:
            return size
    if global_default_size <= 0:
        raise ValueError("global page size must be positive")
    return global_default_size


def plan(
    global_default_size: int,
    forum_override: int | None,
    caller_requested_size: int | None,
    total_items: int,
    requested_page: int | None = None,
) -> PaginationSpec:
    """
    Work out which slice of a list to show.

    Pages past the end are allowed and simply select nothing.
    """
    return PaginationSpec(
        page=positive_int(requested_page) or 1,
        effective_page_size=resolve_page_size(
            global_default_size, forum_override, caller_requested_size
        ),
        total_items=max(total_items, 0),
    )
