"""Initialize models package."""

from picaunified.models.core import ListFilter, RequestOptions, UnifiedEntity

__all__ = [
    "ListFilter",
    "RequestOptions",
    "UnifiedEntity",
]
