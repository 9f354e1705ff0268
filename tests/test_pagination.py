import pytest

from coursework.utils.pagination import Page, parse_pagination, resolve_page


@pytest.mark.parametrize(
    "page_number, page_size, expected",
    [
        (None, None, (1, 20)),
        ("3", "50", (3, 50)),
        ("0", "0", (1, 20)),
        ("-2", "-5", (1, 20)),
        ("abc", "xyz", (1, 20)),
        ("2", "100", (2, 100)),
        ("2", "101", (2, 20)),
    ],
)
def test_parse_pagination(page_number, page_size, expected):
    assert parse_pagination(page_number, page_size) == expected


def test_resolve_page_clamps_to_last_page():
    assert resolve_page(10, 20, 45) == (3, 40)


def test_resolve_page_without_clamp_keeps_requested_page():
    assert resolve_page(10, 20, 45, clamp_to_last=False) == (10, 180)


def test_resolve_page_with_no_items():
    assert resolve_page(4, 20, 0) == (4, 60)
    assert resolve_page(0, 20, 0) == (1, 0)


def test_total_pages():
    assert Page(items=[], page_number=1, page_size=20, total_items=0).total_pages == 0
    assert Page(items=[], page_number=1, page_size=20, total_items=41).total_pages == 3
