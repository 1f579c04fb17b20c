from math import ceil
from typing import Generic, TypeVar

from pydantic import BaseModel, computed_field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class PagedResult(BaseModel, Generic[T]):
    """One page of a listing plus the size of the whole matching set."""

    items: list[T]
    page_number: int
    page_size: int
    total_count: int

    class Config:
        frozen = True
        alias_generator = to_camel
        populate_by_name = True

    @computed_field(alias="totalPages")
    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return ceil(self.total_count / self.page_size)

    @computed_field(alias="hasPrevious")
    @property
    def has_previous(self) -> bool:
        return self.page_number > 1

    @computed_field(alias="hasNext")
    @property
    def has_next(self) -> bool:
        return self.page_number < self.total_pages
