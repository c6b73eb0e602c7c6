"""Filter/search engine for entity collections.

Everything here is a pure projection of the store's items: nothing is
cached, so a view can be recomputed from scratch whenever the items or
the filters change.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

from crmdesk.schemas.common import EntityRecord, FilterSpec, PaginatedResponse
from crmdesk.schemas.task import Task
from crmdesk.services.tasks import priority_rank


@dataclass(frozen=True)
class EntityView:
    """How one entity's page searches, orders and pages its collection."""

    search_fields: tuple[str, ...]
    sort_key: Callable[[Any], Any] | None = None
    paginated: bool = False


def due_date_key(task: Task) -> tuple[bool, date, int]:
    """Ascending by due date, then by priority; tasks without a date go last."""
    return (task.due_date is None, task.due_date or date.min, priority_rank(task.priority))


CONTACT_VIEW = EntityView(
    search_fields=("first_name", "last_name", "email", "company"),
    paginated=True,
)
COMPANY_VIEW = EntityView(search_fields=("name", "location", "description"))
DEAL_VIEW = EntityView(search_fields=("name", "company", "contact"))
TASK_VIEW = EntityView(
    search_fields=("title", "description"),
    sort_key=due_date_key,
    paginated=True,
)


def matches_search(record: EntityRecord, term: str | None, fields: Iterable[str]) -> bool:
    """Case-insensitive substring match on any of the fields.

    A record lacking a field simply does not match on it.
    """
    if not term:
        return True
    needle = term.lower()
    for field in fields:
        value = getattr(record, field, None)
        if value is None:
            continue
        if needle in str(value).lower():
            return True
    return False


def matches_filters(record: EntityRecord, filters: dict[str, Any]) -> bool:
    """Exact match on every categorical filter."""
    return all(getattr(record, name, None) == value for name, value in filters.items())


def filter_records[R: EntityRecord](
    items: Sequence[R],
    filters: FilterSpec,
    view: EntityView,
) -> list[R]:
    term = filters.term
    categorical = filters.categorical()

    result = [
        record
        for record in items
        if matches_search(record, term, view.search_fields)
        and matches_filters(record, categorical)
    ]

    if view.sort_key is not None:
        # sorted() is stable, ties keep the gateway order
        result = sorted(result, key=view.sort_key)

    return result


def paginate[R](items: Sequence[R], page: int, page_size: int) -> PaginatedResponse[R]:
    """Slice one page out of the items.

    Out-of-range pages are clamped so a shrinking collection never
    leaves the UI on an empty page.
    """
    if page_size < 1:
        raise ValueError("page_size must be positive")

    total = len(items)
    pages = math.ceil(total / page_size)
    page = min(max(page, 1), max(pages, 1))
    start = (page - 1) * page_size

    return PaginatedResponse(
        items=list(items[start:start + page_size]),
        total=total,
        page=page,
        page_size=page_size,
        pages=pages,
    )


def single_page[R](items: Sequence[R]) -> PaginatedResponse[R]:
    total = len(items)
    return PaginatedResponse(
        items=list(items),
        total=total,
        page=1,
        page_size=total,
        pages=1 if total else 0,
    )


def distinct_values(items: Iterable[EntityRecord], field: str) -> list[str]:
    """Sorted unique non-empty values, for filter dropdowns."""
    values = {
        str(value)
        for value in (getattr(record, field, None) for record in items)
        if value not in (None, "")
    }
    return sorted(values)


class ListState[F: FilterSpec]:
    """Filters and current page of one list page.

    Changing the filters always sends the user back to page 1.
    """

    def __init__(self, filters: F, view: EntityView, page_size: int = 10) -> None:
        self.filters = filters
        self.view = view
        self.page_size = page_size
        self.page = 1

    def set_filters(self, filters: F) -> bool:
        """Returns True when the filters changed (and the page was reset)."""
        if filters == self.filters:
            return False
        self.filters = filters
        self.page = 1
        return True

    def set_page(self, page: int) -> None:
        self.page = max(page, 1)

    def apply[R: EntityRecord](self, items: Sequence[R]) -> PaginatedResponse[R]:
        filtered = filter_records(items, self.filters, self.view)
        if not self.view.paginated:
            return single_page(filtered)

        result = paginate(filtered, self.page, self.page_size)
        self.page = result.page
        return result
