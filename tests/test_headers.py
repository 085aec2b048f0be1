"""
Alert and pagination header tests
"""

import pytest
from starlette.datastructures import URL

from book_service.models.pagination import Direction, Order, Page, Pageable
from book_service.utils.headers import (
    create_entity_creation_alert,
    create_entity_deletion_alert,
    create_failure_alert,
    generate_pagination_headers,
)

BASE_URL = URL("http://localhost/api/books?page=1&size=2&sort=id,desc")


def _links(header):
    return dict(
        (part.split("; ")[1].split('"')[1], part.split("; ")[0].strip("<>"))
        for part in header.split(",<")
        if part
    )


class TestPaginationHeaders:

    def test_middle_page_links(self):
        page = Page(["a", "b"], Pageable(page=1, size=2), total=5)

        headers = generate_pagination_headers(BASE_URL, page)

        assert headers["X-Total-Count"] == "5"
        links = _links(headers["Link"])
        assert set(links) == {"next", "prev", "last", "first"}
        assert "page=2" in links["next"]
        assert "page=0" in links["prev"]
        assert "page=2" in links["last"]
        assert "page=0" in links["first"]
        assert "sort=id%2Cdesc" in links["next"]

    def test_first_page_has_no_prev(self):
        headers = generate_pagination_headers(BASE_URL, Page(["a", "b"], Pageable(page=0, size=2), total=5))

        assert set(_links(headers["Link"])) == {"next", "last", "first"}

    def test_empty_result_links_to_page_zero(self):
        headers = generate_pagination_headers(BASE_URL, Page([], Pageable(page=0, size=20), total=0))

        links = _links(headers["Link"])
        assert set(links) == {"last", "first"}
        assert "page=0" in links["last"]
        assert headers["X-Total-Count"] == "0"


class TestPage:

    @pytest.mark.parametrize("total,size,pages", [(0, 20, 1), (20, 20, 1), (21, 20, 2), (5, 2, 3)])
    def test_total_pages(self, total, size, pages):
        assert Page([], Pageable(size=size), total).total_pages == pages

    def test_first_and_last(self):
        page = Page([], Pageable(page=2, size=2), total=5)

        assert page.is_last()
        assert not page.is_first()


class TestOrder:

    def test_parse_defaults_to_ascending(self):
        assert Order.parse("title") == Order(property="title", direction=Direction.ASC)

    def test_parse_direction_case_insensitive(self):
        order = Order.parse("id,Desc")

        assert order.direction == Direction.DESC

    @pytest.mark.parametrize("expression", ["", ",", "id,up", "id,asc,more"])
    def test_parse_rejects(self, expression):
        with pytest.raises(ValueError):
            Order.parse(expression)


class TestAlerts:

    def test_creation_alert(self):
        assert create_entity_creation_alert("bookservice", "book", "3") == {
            "X-bookservice-alert": "bookservice.book.created",
            "X-bookservice-params": "3",
        }

    def test_deletion_alert(self):
        assert create_entity_deletion_alert("app", "book", "3")["X-app-alert"] == "app.book.deleted"

    def test_failure_alert(self):
        assert create_failure_alert("app", "book", "idnull") == {
            "X-app-error": "error.idnull",
            "X-app-params": "book",
        }
