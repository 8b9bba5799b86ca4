"""Exception types for the store and predicates that recognise them in chains."""

from __future__ import annotations


class NutsError(Exception):
    """Base class for all errors raised by the store."""

    default_message = "nutskv error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class DBClosedError(NutsError):
    """The database has already been closed."""

    default_message = "db is closed"


class KeyNotFoundError(NutsError):
    """The requested key does not exist."""

    default_message = "key not found"


class BucketNotFoundError(NutsError):
    """The requested bucket does not exist."""

    default_message = "bucket not found"


class BucketEmptyError(NutsError):
    """The bucket holds no data."""

    default_message = "bucket is empty"


class KeyEmptyError(NutsError):
    """An empty key was given where one is required."""

    default_message = "key can not be empty"


class PrefixScanError(NutsError):
    """A prefix scan found nothing."""

    default_message = "prefix scans not found"


class PrefixSearchScanError(NutsError):
    """A prefix and pattern scan found nothing."""

    default_message = "prefix and search scans not found"


def _chain(err: BaseException | None):
    """Yield the error and every error it was raised from or during."""
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        yield err
        if err.__cause__ is not None:
            err = err.__cause__
        elif not err.__suppress_context__:
            err = err.__context__
        else:
            err = None


def _is(err: BaseException | None, kind: type[BaseException]) -> bool:
    return any(isinstance(e, kind) for e in _chain(err))


def is_db_closed(err: BaseException | None) -> bool:
    """True if the error, or one it wraps, says the database was closed."""
    return _is(err, DBClosedError)


def is_key_not_found(err: BaseException | None) -> bool:
    """True if the error, or one it wraps, says a key was not found."""
    return _is(err, KeyNotFoundError)


def is_bucket_not_found(err: BaseException | None) -> bool:
    """True if the error, or one it wraps, says a bucket does not exist."""
    return _is(err, BucketNotFoundError)


def is_bucket_empty(err: BaseException | None) -> bool:
    """True if the error, or one it wraps, says a bucket is empty."""
    return _is(err, BucketEmptyError)


def is_key_empty(err: BaseException | None) -> bool:
    """True if the error, or one it wraps, says a key was empty."""
    return _is(err, KeyEmptyError)


def is_prefix_scan(err: BaseException | None) -> bool:
    """True if the error, or one it wraps, says a prefix scan found nothing."""
    return _is(err, PrefixScanError)


def is_prefix_search_scan(err: BaseException | None) -> bool:
    """True if the error, or one it wraps, says a prefix search scan found nothing."""
    return _is(err, PrefixSearchScanError)