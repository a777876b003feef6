"""Domain model package.

PagedResult and QueryOptions carry no ORM or session references.  Import
from this package to avoid coupling callers to individual module paths.
"""

from .pagination import PagedResult
from .query import OrderFn, QueryOptions

__all__ = [
    "PagedResult",
    "QueryOptions",
    "OrderFn",
]
