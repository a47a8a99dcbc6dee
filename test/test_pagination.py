"""
Tests for pagination parameters, metadata and paged queries
"""

import json
import math

import pytest
from sqlalchemy import select

from company_employees.config import settings
from company_employees.models import Employee
from company_employees.utils.pagination import (
    MAX_AGE,
    MAX_OFFSET,
    CompanyParameters,
    EmployeeParameters,
    PageMetadata,
    PagedList,
    PaginationParameters,
    _to_int,
    normalize,
    paginate,
    valid_range,
)


class TestNormalize:
    """Test clamping of client paging input"""

    def test_defaults(self):
        params = normalize()
        assert params == PaginationParameters(page_number=1, page_size=settings.default_page_size)

    def test_negative_page_and_oversized_page(self):
        params = normalize(page_number=-5, page_size=999999)
        assert params.page_number == 1
        assert params.page_size == settings.max_page_size

    def test_zero_values(self):
        params = normalize(page_number=0, page_size=0, default_page_size=10, max_page_size=50)
        assert params == PaginationParameters(page_number=1, page_size=10)

    def test_explicit_limits(self):
        assert normalize(3, 80, default_page_size=10, max_page_size=50) == PaginationParameters(3, 50)
        assert normalize(3, 20, default_page_size=10, max_page_size=50) == PaginationParameters(3, 20)

    def test_huge_page_number_keeps_offset_in_range(self):
        params = normalize(10**20, 10, default_page_size=10, max_page_size=50)
        assert params.page_number == MAX_OFFSET // 10 + 1
        assert 0 <= params.skip <= MAX_OFFSET

    def test_skip_and_take(self):
        params = PaginationParameters(page_number=2, page_size=10)
        assert params.skip == 10
        assert params.take == 10

    @pytest.mark.parametrize("raw, expected", [("3", 3), (" 7 ", 7), ("abc", None), ("", None), (None, None)])
    def test_unparseable_query_values_fall_back(self, raw, expected):
        assert _to_int(raw) == expected


class TestValidRange:
    """Test range filter validation"""

    def test_max_below_min(self):
        assert valid_range(10, 5) is False

    def test_max_above_min(self):
        assert valid_range(5, 10) is True

    def test_equal_bounds(self):
        assert valid_range(5, 5) is True


class TestPageMetadata:
    """Test metadata computation"""

    def test_scenario_page_two_of_three(self):
        metadata = PageMetadata.build(total_count=25, page_number=2, page_size=10)
        assert metadata.current_page == 2
        assert metadata.page_size == 10
        assert metadata.total_count == 25
        assert metadata.total_pages == 3
        assert metadata.has_previous is True
        assert metadata.has_next is True

    def test_empty_result_has_no_pages(self):
        metadata = PageMetadata.build(total_count=0, page_number=1, page_size=10)
        assert metadata.total_pages == 0
        assert metadata.has_next is False
        assert metadata.has_previous is False

    def test_total_pages_matches_ceiling(self):
        for total in range(0, 60):
            for size in (1, 3, 10, 50):
                metadata = PageMetadata.build(total, 1, size)
                assert metadata.total_pages == math.ceil(total / size)

    def test_immutable(self):
        metadata = PageMetadata.build(5, 1, 10)
        with pytest.raises(AttributeError):
            metadata.total_count = 6

    def test_header_format(self):
        header = json.loads(PageMetadata.build(25, 2, 10).to_header())
        assert header == {
            "currentPage": 2,
            "pageSize": 10,
            "totalCount": 25,
            "totalPages": 3,
            "hasPrevious": True,
            "hasNext": True,
        }


class TestPagedListFromSequence:
    """Test in-memory paging"""

    def test_second_page_of_twenty_five(self):
        paged = PagedList.from_sequence(range(25), PaginationParameters(2, 10))
        assert paged.items == list(range(10, 20))
        assert paged.metadata == PageMetadata.build(25, 2, 10)

    def test_last_page_is_partial(self):
        paged = PagedList.from_sequence(range(25), PaginationParameters(3, 10))
        assert paged.items == [20, 21, 22, 23, 24]
        assert paged.metadata.has_next is False

    def test_count_comes_from_filtered_set(self):
        paged = PagedList.from_sequence(range(25), PaginationParameters(1, 10), predicate=lambda n: n % 2 == 0)
        assert paged.metadata.total_count == 13
        assert paged.metadata.total_pages == 2
        assert paged.items == [0, 2, 4, 6, 8, 10, 12, 14, 16, 18]

    def test_sort_before_slicing(self):
        paged = PagedList.from_sequence([3, 1, 2], PaginationParameters(1, 2), key=lambda n: n, reverse=True)
        assert paged.items == [3, 2]

    def test_page_past_the_end_is_empty(self):
        paged = PagedList.from_sequence(range(5), PaginationParameters(4, 10))
        assert paged.items == []
        assert paged.metadata.total_count == 5
        assert len(paged) == 0

    def test_items_never_exceed_page_size(self):
        for size in (1, 4, 10):
            for page in (1, 2, 3, 9):
                paged = PagedList.from_sequence(range(25), PaginationParameters(page, size))
                assert len(paged.items) <= paged.metadata.page_size


class TestPaginateQuery:
    """Test paging a SQLAlchemy select"""

    async def test_second_page(self, test_db, staffed_company):
        stmt = select(Employee).where(Employee.company_id == staffed_company.id).order_by(Employee.name)
        paged = await paginate(test_db, stmt, PaginationParameters(2, 10))

        assert [employee.name for employee in paged] == [f"Employee {n:02d}" for n in range(11, 21)]
        assert paged.metadata == PageMetadata.build(25, 2, 10)

    async def test_count_uses_filter(self, test_db, staffed_company, other_company):
        test_db.add(Employee(name="Outsider", age=40, position="Manager", company_id=other_company.id))
        await test_db.commit()

        stmt = (
            select(Employee)
            .where(Employee.company_id == staffed_company.id, Employee.age >= 40)
            .order_by(Employee.age)
        )
        paged = await paginate(test_db, stmt, PaginationParameters(1, 3))

        assert paged.metadata.total_count == 5
        assert paged.metadata.total_pages == 2
        assert [employee.age for employee in paged] == [40, 41, 42]


class TestRequestParameters:
    """Test the parameter objects built from the query string"""

    def test_company_defaults(self):
        params = CompanyParameters()
        assert params.page_number == 1
        assert params.page_size == settings.default_page_size
        assert params.order_by == "name"
        assert params.fields == ()

    def test_fields_are_parsed(self):
        assert CompanyParameters(fields="name,Name,id").fields == ("name", "id")

    def test_employee_age_range(self):
        assert EmployeeParameters().valid_age_range is True
        assert EmployeeParameters().max_age == MAX_AGE
        assert EmployeeParameters(min_age=30, max_age=20).valid_age_range is False
        assert EmployeeParameters(min_age=30, max_age=30).valid_age_range is True

    def test_search_term_is_trimmed(self):
        assert EmployeeParameters(search_term="  sam ").search_term == "sam"
        assert EmployeeParameters(search_term="   ").search_term is None
