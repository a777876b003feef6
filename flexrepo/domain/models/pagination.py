"""Paged result model.

A PagedResult is a detached snapshot of one page: it is built once by the
paginator from a completed count + fetch and never changes afterwards.
total_pages and the has_*_page flags are derived, so they cannot disagree
with total_count / page_size.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

T = TypeVar("T")


class PagedResult(BaseModel, Generic[T]):
    """One page of items plus the counts needed to navigate the rest.

    page_index is 1-based.  Requesting a page past the last one is legal and
    produces an empty items tuple with total_pages still correct.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    page_index: int = Field(ge=1)
    page_size: int = Field(ge=1)
    total_count: int = Field(ge=0)
    items: tuple[T, ...] = ()

    @model_validator(mode="after")
    def check_items_fit_page(self) -> PagedResult[T]:
        if len(self.items) > self.page_size:
            raise ValueError(
                f"page holds {len(self.items)} items but page_size is {self.page_size}"
            )
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        # ceil without floats; 0 when there is nothing to page through
        return -(-self.total_count // self.page_size)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_previous_page(self) -> bool:
        return self.page_index > 1

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_next_page(self) -> bool:
        return self.page_index < self.total_pages
