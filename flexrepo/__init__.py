"""flexrepo — generic async repository, query composition and pagination for SQLAlchemy.

    async with AsyncSessionLocal() as session:
        customers = SqlRepository(session, Customer)
        page = await customers.get_paginated(
            1, 20, QueryOptions(order_by=lambda q: q.order_by(Customer.name))
        )

Importing flexrepo does not create an engine; the engine and session factory
live in flexrepo.infrastructure.database.
"""

from flexrepo.domain.exceptions import (
    InvalidArgument,
    NotFound,
    OperationCancelled,
    PrimaryKeyResolutionFailure,
    RepositoryError,
)
from flexrepo.domain.models import PagedResult, QueryOptions
from flexrepo.domain.repositories import Repository
from flexrepo.infrastructure.persistence import Paginator, QueryComposer, SqlRepository

__all__ = [
    "InvalidArgument",
    "NotFound",
    "OperationCancelled",
    "PagedResult",
    "Paginator",
    "PrimaryKeyResolutionFailure",
    "QueryComposer",
    "QueryOptions",
    "Repository",
    "RepositoryError",
    "SqlRepository",
]
