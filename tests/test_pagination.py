import pytest

from apps.common.exceptions import ValidationError
from apps.common.pagination import page_bounds, paginate


def test_last_page_of_three():
    meta = paginate(10, 3, 23)
    assert meta == {
        'has_next': False,
        'has_previous': True,
        'page_count': 3,
        'page_size': 10,
        'page': 3,
        'total_items': 23,
    }


def test_first_page_has_no_previous():
    meta = paginate(10, 1, 23)
    assert meta['has_previous'] is False
    assert meta['has_next'] is True


def test_empty_result():
    meta = paginate(10, 1, 0)
    assert meta['page_count'] == 0
    assert meta['has_next'] is False


def test_exact_multiple():
    assert paginate(5, 2, 10)['page_count'] == 2
    assert paginate(5, 2, 10)['has_next'] is False


@pytest.mark.parametrize('size, page', [(0, 1), (-1, 1), (10, 0), (10, -2), (None, 1)])
def test_non_positive_values_are_rejected(size, page):
    with pytest.raises(ValidationError):
        paginate(size, page, 5)


def test_page_bounds():
    assert page_bounds(1, 10) == (0, 10)
    assert page_bounds(3, 25) == (50, 25)
    with pytest.raises(ValidationError):
        page_bounds(0, 10)
