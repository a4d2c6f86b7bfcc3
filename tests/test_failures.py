import pytest

from fieldnotes.failures import (
    NotFoundError,
    PanicRecoveredError,
    ValidationError,
    divide,
    divide_int,
    load_user,
    read_file,
    recover_at_boundary,
    validate_age,
)


def test_load_user_not_found():
    with pytest.raises(NotFoundError) as info:
        load_user(0)
    assert str(info.value) == "load user: not found"
    assert isinstance(info.value.__cause__, NotFoundError)


def test_load_user_validation():
    with pytest.raises(ValidationError) as info:
        load_user(-1)
    assert info.value.field == "id"
    assert info.value.message == "must be positive"
    assert str(info.value) == "load user: validation failed on id: must be positive"


def test_load_user_ok():
    assert load_user(42) is None


def test_validate_age():
    with pytest.raises(ValidationError) as info:
        validate_age(-5)
    assert (info.value.field, info.value.message) == ("Age", "must be non-negative")
    assert str(info.value) == "Age: must be non-negative"
    assert validate_age(0) is None


def test_divide():
    assert divide(10, 2) == 5
    with pytest.raises(ZeroDivisionError, match="division by zero"):
        divide(10, 0)


def test_divide_int_truncates_toward_zero():
    assert divide_int(10, 2) == 5
    assert divide_int(-7, 2) == -(7 // 2)
    assert divide_int(7, -2) == divide_int(-7, 2)
    assert divide_int(-7, -2) == divide_int(7, 2)
    with pytest.raises(ZeroDivisionError, match="division by zero"):
        divide_int(10, 0)


def test_read_file_wraps_cause():
    with pytest.raises(FileNotFoundError) as info:
        read_file("test.txt")
    assert str(info.value) == "failed to read test.txt: file not found"
    assert str(info.value.__cause__) == "file not found"


def test_recover_at_boundary_catches():
    def boom():
        raise RuntimeError("boom")

    with pytest.raises(PanicRecoveredError) as info:
        recover_at_boundary(boom)
    assert str(info.value) == "panic recovered: boom"
    assert isinstance(info.value.__cause__, RuntimeError)


def test_recover_at_boundary_normal():
    calls = []
    assert recover_at_boundary(lambda: calls.append("ran")) is None
    assert calls == ["ran"]