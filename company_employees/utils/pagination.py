"""
Pagination Utilities

Offset pagination for list endpoints. Page numbers and sizes coming from
clients are clamped instead of rejected; range filters are validated
strictly by the caller before any query runs. Metadata is always computed
from the filtered set the page was taken from.
"""

import json
import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from fastapi import Query, Response
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from company_employees.config import settings
from company_employees.utils.field_selector import parse_fields

logger = logging.getLogger(__name__)

T = TypeVar("T")

PAGINATION_HEADER = "X-Pagination"
MAX_AGE = 2**31 - 1
MAX_OFFSET = 2**63 - 1


@dataclass(frozen=True)
class PaginationParameters:
    page_number: int
    page_size: int

    @property
    def skip(self) -> int:
        return (self.page_number - 1) * self.page_size

    @property
    def take(self) -> int:
        return self.page_size


def normalize(
    page_number: int | None = None,
    page_size: int | None = None,
    *,
    default_page_size: int | None = None,
    max_page_size: int | None = None,
) -> PaginationParameters:
    """
    Clamp client supplied paging values into the allowed window.

    Non-positive page numbers become 1, non-positive page sizes become the
    default and oversized pages are cut down to the server maximum. Page
    numbers are capped so the row offset fits a signed 64-bit integer.
    """
    if default_page_size is None:
        default_page_size = settings.default_page_size
    if max_page_size is None:
        max_page_size = settings.max_page_size

    if page_number is None or page_number <= 0:
        page_number = 1
    if page_size is None or page_size <= 0:
        page_size = default_page_size
    page_size = min(page_size, max_page_size)
    page_number = min(page_number, MAX_OFFSET // page_size + 1)

    return PaginationParameters(page_number=page_number, page_size=page_size)


def valid_range(min_value: Any, max_value: Any) -> bool:
    """Return True when ``max_value`` is not below ``min_value``."""
    return max_value >= min_value


@dataclass(frozen=True)
class PageMetadata:
    current_page: int
    page_size: int
    total_count: int
    total_pages: int
    has_previous: bool
    has_next: bool

    @classmethod
    def build(cls, total_count: int, page_number: int, page_size: int) -> "PageMetadata":
        total_pages = math.ceil(total_count / page_size) if total_count else 0
        return cls(
            current_page=page_number,
            page_size=page_size,
            total_count=total_count,
            total_pages=total_pages,
            has_previous=page_number > 1,
            has_next=page_number < total_pages,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "currentPage": self.current_page,
            "pageSize": self.page_size,
            "totalCount": self.total_count,
            "totalPages": self.total_pages,
            "hasPrevious": self.has_previous,
            "hasNext": self.has_next,
        }

    def to_header(self) -> str:
        return json.dumps(self.to_dict())


@dataclass
class PagedList(Generic[T]):
    """One page of items together with the metadata describing it."""

    items: list[T]
    metadata: PageMetadata

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @classmethod
    def from_sequence(
        cls,
        source: Iterable[T],
        pagination: PaginationParameters,
        predicate: Callable[[T], bool] | None = None,
        key: Callable[[T], Any] | None = None,
        reverse: bool = False,
    ) -> "PagedList[T]":
        """Filter, sort and slice an in-memory collection."""
        filtered = [item for item in source if predicate is None or predicate(item)]
        if key is not None:
            filtered.sort(key=key, reverse=reverse)
        page = filtered[pagination.skip : pagination.skip + pagination.take]
        metadata = PageMetadata.build(len(filtered), pagination.page_number, pagination.page_size)
        return cls(items=page, metadata=metadata)


async def paginate(db: AsyncSession, stmt: Select, pagination: PaginationParameters) -> PagedList:
    """
    Run a filtered, sorted select one page at a time.

    The total is counted from the same statement with its ordering removed,
    so filters always apply to both the count and the page.
    """
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total_count = (await db.execute(count_stmt)).scalar_one()

    result = await db.execute(stmt.offset(pagination.skip).limit(pagination.take))
    items = list(result.scalars().all())

    metadata = PageMetadata.build(total_count, pagination.page_number, pagination.page_size)
    logger.debug(
        f"Fetched page {metadata.current_page}/{metadata.total_pages} "
        f"({len(items)} of {metadata.total_count} items)"
    )
    return PagedList(items=items, metadata=metadata)


def set_pagination_header(response: Response, metadata: PageMetadata) -> None:
    response.headers[PAGINATION_HEADER] = metadata.to_header()


class RequestParameters:
    """Paging, sorting and field selection shared by every list endpoint."""

    default_order_by = "name"

    def __init__(
        self,
        page_number: int | None = None,
        page_size: int | None = None,
        order_by: str | None = None,
        fields: str | None = None,
    ):
        self.pagination = normalize(page_number, page_size)
        self.order_by = order_by or self.default_order_by
        self.fields = parse_fields(fields)

    @property
    def page_number(self) -> int:
        return self.pagination.page_number

    @property
    def page_size(self) -> int:
        return self.pagination.page_size


class CompanyParameters(RequestParameters):
    pass


class EmployeeParameters(RequestParameters):
    def __init__(
        self,
        page_number: int | None = None,
        page_size: int | None = None,
        order_by: str | None = None,
        fields: str | None = None,
        min_age: int = 0,
        max_age: int = MAX_AGE,
        search_term: str | None = None,
    ):
        super().__init__(page_number, page_size, order_by, fields)
        self.min_age = min_age
        self.max_age = max_age
        self.search_term = search_term.strip() if search_term and search_term.strip() else None

    @property
    def valid_age_range(self) -> bool:
        return valid_range(self.min_age, self.max_age)


def _to_int(value: str | None) -> int | None:
    # Unparseable paging input falls back to the defaults instead of failing the request.
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def company_parameters(
    page_number: str | None = Query(default=None, alias="pageNumber", description="Page number (1-indexed)"),
    page_size: str | None = Query(default=None, alias="pageSize", description="Items per page"),
    order_by: str | None = Query(default=None, alias="orderBy", description="e.g. 'name desc'"),
    fields: str | None = Query(default=None, description="Comma-separated list of fields to include"),
) -> CompanyParameters:
    """FastAPI dependency for company list query parameters."""
    return CompanyParameters(_to_int(page_number), _to_int(page_size), order_by, fields)


def employee_parameters(
    page_number: str | None = Query(default=None, alias="pageNumber", description="Page number (1-indexed)"),
    page_size: str | None = Query(default=None, alias="pageSize", description="Items per page"),
    order_by: str | None = Query(default=None, alias="orderBy", description="e.g. 'age desc, name'"),
    fields: str | None = Query(default=None, description="Comma-separated list of fields to include"),
    min_age: int = Query(default=0, ge=0, le=MAX_AGE, alias="minAge"),
    max_age: int = Query(default=MAX_AGE, ge=0, le=MAX_AGE, alias="maxAge"),
    search_term: str | None = Query(default=None, alias="searchTerm"),
) -> EmployeeParameters:
    """FastAPI dependency for employee list query parameters."""
    return EmployeeParameters(_to_int(page_number), _to_int(page_size), order_by, fields, min_age, max_age, search_term)
