from __future__ import annotations

from typing import Any

from fastapi import HTTPException
from pydantic import ValidationError

from crmdesk.schemas.common import CollectionView, EntityRecord, FilterSpec, PaginatedResponse
from crmdesk.services.filtering import ListState
from crmdesk.services.store import EntityStore


def parse_filters[F: FilterSpec](model: type[F], **values: Any) -> F:
    """Build a filter spec from query parameters, rejecting unknown categories."""
    try:
        return model.model_validate(values)
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=f"Invalid filter: {e.errors()[0]['msg']}",
        ) from e


async def load_view[R: EntityRecord, F: FilterSpec](
    model: type[R],
    store: EntityStore[R],
    state: ListState[F],
    filters: F,
    page: int = 1,
    refresh: bool = False,
) -> CollectionView[R]:
    """Apply the page's filter state and return the visible slice.

    The store is loaded on first access and reloaded on demand; a
    failed load keeps the previous items and reports the banner error.
    """
    if not state.set_filters(filters):
        state.set_page(page)

    if refresh:
        await store.refresh(state.filters)
    elif not store.loaded:
        await store.refresh()

    result = state.apply(store.items)
    return CollectionView[model](  # type: ignore[valid-type]
        page=PaginatedResponse[model](  # type: ignore[valid-type]
            items=result.items,
            total=result.total,
            page=result.page,
            page_size=result.page_size,
            pages=result.pages,
        ),
        is_loading=store.is_loading,
        error=store.error,
        selected_id=store.selected_id,
    )
