"""Persistence package.

Exports the SQLAlchemy repository and the query composition / pagination
engine it is built on.
"""

from flexrepo.infrastructure.persistence.cancellation import run_cancellable
from flexrepo.infrastructure.persistence.keys import primary_key_columns
from flexrepo.infrastructure.persistence.paginator import Paginator
from flexrepo.infrastructure.persistence.query_composer import (
    QueryComposer,
    split_include_paths,
)
from flexrepo.infrastructure.persistence.repository import SqlRepository

__all__ = [
    "Paginator",
    "QueryComposer",
    "SqlRepository",
    "primary_key_columns",
    "run_cancellable",
    "split_include_paths",
]
