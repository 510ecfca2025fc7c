"""FastAPI dependencies that read a sort descriptor from the request."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from fastapi import Request

from sorting.core.config import get_settings
from sorting.descriptor import SortDescriptor

__all__ = ["get_raw_sort", "sort_descriptor"]

T = TypeVar("T")


def get_raw_sort(request: Request) -> str | None:
    """
    Descriptor string from the query string; repeated parameters
    (`?sort=-Id&sort=Name`) are joined in order.
    """
    values = request.query_params.getlist(get_settings().sort_param)
    return ",".join(values) if values else None


def sort_descriptor(entity_type: type[T]) -> Callable[[Request], SortDescriptor[T]]:
    """Build a dependency returning the request's descriptor for `entity_type`.

    @router.get("/widgets")
    def list_widgets(sort: SortDescriptor[Widget] = Depends(sort_descriptor(Widget))): ...
    """

    def _dependency(request: Request) -> SortDescriptor[T]:
        return SortDescriptor(entity_type, get_raw_sort(request))

    return _dependency
