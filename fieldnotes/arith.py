"""Small arithmetic helpers: plain, variadic and closure-based."""

from __future__ import annotations

from collections.abc import Callable


def add(a: int, b: int) -> int:
    """Return the sum of a and b."""
    return a + b


def multiply(a: int, b: int) -> int:
    """Return the product of a and b."""
    return a * b


def total(*nums: int) -> int:
    """Return the sum of any number of integers; zero when none are given."""
    return sum(nums)


def make_counter() -> Callable[[], int]:
    """Return a function that yields 1, 2, 3, ... on successive calls."""
    count = 0

    def counter() -> int:
        nonlocal count
        count += 1
        return count

    return counter