"""Links that carry the next sort descriptor, e.g. for sortable column headers."""

from __future__ import annotations

from fastapi import Request

from sorting.core.config import get_settings
from sorting.descriptor import SortDescriptor

__all__ = ["remove_sort_link", "sort_link", "sort_links"]


def _with_sort(request: Request, value: str) -> str:
    name = get_settings().sort_param
    url = request.url.remove_query_params(name)
    if value:
        url = url.include_query_params(**{name: value})
    return str(url)


def sort_link(request: Request, descriptor: SortDescriptor, field: str) -> str:
    """Current URL with `field` appended to the descriptor or its direction flipped."""
    return _with_sort(request, descriptor.add_or_update(field))


def remove_sort_link(request: Request, descriptor: SortDescriptor, field: str) -> str:
    """Current URL with `field` removed from the descriptor."""
    return _with_sort(request, descriptor.remove(field))


def sort_links(request: Request, descriptor: SortDescriptor) -> dict[str, str]:
    return {name: sort_link(request, descriptor, name) for name in descriptor.schema.field_names}
