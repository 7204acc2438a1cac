"""Pagination and sorting requests, and pages of results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class Direction(IntEnum):
    """Sort direction."""

    ASC = 0
    DESC = 1


@dataclass(frozen=True)
class Order:
    """A single sort order on one field."""

    field: str
    direction: Direction = Direction.ASC


@dataclass(frozen=True)
class Sort:
    """An ordered collection of sort orders."""

    orders: tuple[Order, ...] = ()


@dataclass(frozen=True)
class Pageable:
    """A zero-based page request with size and sort."""

    page: int = 0
    size: int = 0
    sort: Sort = Sort()

    def next(self) -> Pageable:
        """Return the request for the following page."""
        return Pageable(page=self.page + 1, size=self.size, sort=self.sort)

    def previous(self) -> Pageable:
        """Return the request for the preceding page, or the first page."""
        if self.page <= 0:
            return self.first()
        return Pageable(page=self.page - 1, size=self.size, sort=self.sort)

    def first(self) -> Pageable:
        """Return the request for the first page."""
        return Pageable(page=0, size=self.size, sort=self.sort)


@dataclass
class Page(Generic[T]):
    """One page of results together with paging metadata."""

    content: list[T] = field(default_factory=list)
    pageable: Pageable = Pageable()
    total_elements: int = 0
    total_pages: int = 0
    size: int = 0
    number: int = 0
    number_of_elements: int = 0
    first: bool = False
    last: bool = False
    empty: bool = False
    sort: Sort = Sort()


def page_request(page: int, size: int, *orders: Order) -> Pageable:
    """Build a Pageable for the given page, size and sort orders."""
    return Pageable(page=page, size=size, sort=Sort(orders=tuple(orders)))


def unpaged() -> Pageable:
    """Build a Pageable that asks for no pagination."""
    return Pageable(page=0, size=-1)