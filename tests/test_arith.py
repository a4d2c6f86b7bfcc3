import pytest

from fieldnotes.arith import add, make_counter, multiply, total


@pytest.mark.parametrize(
    ("a", "b", "want"),
    [(1, 2, 3), (2, 2, 4), (0, 0, 0)],
)
def test_add(a, b, want):
    assert add(a, b) == want


@pytest.mark.parametrize(
    ("a", "b", "want"),
    [
        (2, 3, 6),
        (-2, 3, -6),
        (5, 0, 0),
        (2, 2, 4),
        (3, 3, 9),
    ],
    ids=["positive numbers", "negative numbers", "zeros", "2x2", "3x3"],
)
def test_multiply(a, b, want):
    assert multiply(a, b) == want


def test_multiply_example():
    assert multiply(2, 5) == 10


def test_total_of_no_arguments_is_zero():
    assert total() == 0


def test_total_of_unpacked_list_matches_arguments():
    values = [4, 5, 6]
    assert total(*values) == total(4, 5, 6)
    assert total(*values) == add(add(4, 5), 6)


def test_total_of_single_value_is_that_value():
    assert total(7) == 7


def test_counter_counts_up_from_one():
    counter = make_counter()
    assert [counter(), counter(), counter()] == [1, 2, 3]


def test_counters_are_independent():
    first = make_counter()
    second = make_counter()
    first()
    first()
    assert second() == 1
    assert first() == 3