"""
Tests for Pagination Metadata

PaginationMeta.build() backs every paginated endpoint; the HTTP-level
behaviour is covered in test_books.py.
"""

import pytest

from app.schemas import PaginationMeta
from app.services.catalog import offset_for


class TestPaginationMeta:
    """Tests for PaginationMeta.build()"""

    def test_no_items(self):
        meta = PaginationMeta.build(page=1, limit=10, total_items=0)

        assert meta.total_pages == 0
        assert meta.has_next_page is False
        assert meta.has_prev_page is False

    def test_exact_multiple(self):
        meta = PaginationMeta.build(page=1, limit=10, total_items=10)

        assert meta.total_pages == 1
        assert meta.has_next_page is False

    @pytest.mark.parametrize(
        "page, has_next, has_prev",
        [
            (1, True, False),
            (2, True, True),
            (3, False, True),
            (4, False, True),
        ],
    )
    def test_page_flags(self, page, has_next, has_prev):
        meta = PaginationMeta.build(page=page, limit=5, total_items=12)

        assert meta.total_pages == 3
        assert meta.has_next_page is has_next
        assert meta.has_prev_page is has_prev

    def test_serialized_in_camel_case(self):
        meta = PaginationMeta.build(page=2, limit=5, total_items=12)

        assert meta.model_dump(by_alias=True) == {
            "page": 2,
            "limit": 5,
            "totalItems": 12,
            "totalPages": 3,
            "hasNextPage": True,
            "hasPrevPage": True,
        }


@pytest.mark.parametrize(
    "page, limit, expected",
    [(1, 10, 0), (2, 10, 10), (3, 5, 10)],
)
def test_offset_for(page, limit, expected):
    assert offset_for(page, limit) == expected
