import pytest

from nutskv.errors import (
    BucketEmptyError,
    BucketNotFoundError,
    DBClosedError,
    KeyEmptyError,
    KeyNotFoundError,
    NutsError,
    PrefixScanError,
    PrefixSearchScanError,
    is_bucket_empty,
    is_bucket_not_found,
    is_db_closed,
    is_key_empty,
    is_key_not_found,
    is_prefix_scan,
    is_prefix_search_scan,
)


def wrap(err, message):
    wrapper = RuntimeError(message)
    wrapper.__cause__ = err
    return wrapper


@pytest.mark.parametrize(
    "err, want",
    [
        (KeyNotFoundError(), True),
        (wrap(KeyNotFoundError(), "foobar"), True),
        (RuntimeError("foo bar"), False),
    ],
)
def test_is_key_not_found(err, want):
    assert is_key_not_found(err) is want


@pytest.mark.parametrize(
    "err, want",
    [
        (RuntimeError("foo error"), False),
        (wrap(RuntimeError("sourceErr"), "foo error"), False),
        (wrap(KeyEmptyError(), "foo error"), True),
        (wrap(KeyEmptyError(), "foo Err"), True),
        (wrap(KeyEmptyError(), "foo Err " + str(KeyEmptyError())), True),
        (KeyEmptyError(), True),
        (KeyNotFoundError(), False),
    ],
)
def test_is_key_empty(err, want):
    assert is_key_empty(err) is want


@pytest.mark.parametrize(
    "err, want",
    [
        (BucketNotFoundError(), True),
        (wrap(BucketNotFoundError(), "foobar"), True),
        (RuntimeError("foobar"), False),
    ],
)
def test_is_bucket_not_found(err, want):
    assert is_bucket_not_found(err) is want


@pytest.mark.parametrize(
    "err, want",
    [
        (BucketEmptyError(), True),
        (wrap(BucketEmptyError(), "foobar"), True),
        (RuntimeError("foobar"), False),
    ],
)
def test_is_bucket_empty(err, want):
    assert is_bucket_empty(err) is want


def test_is_db_closed():
    assert is_db_closed(DBClosedError()) is True
    assert is_db_closed(wrap(DBClosedError(), "update failed")) is True
    assert is_db_closed(KeyNotFoundError()) is False


def test_is_prefix_scan():
    assert is_prefix_scan(PrefixScanError()) is True
    assert is_prefix_scan(PrefixSearchScanError()) is False
    assert is_prefix_scan(None) is False


def test_is_prefix_search_scan():
    assert is_prefix_search_scan(PrefixSearchScanError()) is True
    assert is_prefix_search_scan(PrefixScanError()) is False


def test_implicit_context_is_followed():
    with pytest.raises(ValueError) as info:
        try:
            raise KeyNotFoundError()
        except KeyNotFoundError:
            raise ValueError("while handling")
    assert is_key_not_found(info.value) is True


def test_suppressed_context_is_not_followed():
    with pytest.raises(ValueError) as info:
        try:
            raise KeyNotFoundError()
        except KeyNotFoundError:
            raise ValueError("fresh") from None
    assert is_key_not_found(info.value) is False


def test_cycle_in_chain_terminates():
    a = RuntimeError("a")
    b = RuntimeError("b")
    a.__cause__ = b
    b.__cause__ = a
    assert is_key_not_found(a) is False


def test_default_and_custom_messages():
    assert str(KeyNotFoundError()) == "key not found"
    assert str(BucketNotFoundError("custom")) == "custom"
    assert isinstance(DBClosedError(), NutsError)