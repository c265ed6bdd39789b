"""Internal shared utilities for codecstream."""

from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator, Iterable
from typing import Generic, TypeVar, Union

T = TypeVar("T")

#: Source of chunks: anything iterable, synchronously or asynchronously.
Source = Union[AsyncIterable[T], Iterable[T]]

#: Longest byte-order mark recognised (UTF-8).
MAX_BOM_LENGTH: int = 3

#: Number of leading bytes inspected for NUL bytes by the binary heuristic.
ZERO_BYTE_DETECTION_BUFFER_MAX_LEN: int = 512

#: Default collection threshold when no encoding guess is requested.
NO_ENCODING_GUESS_MIN_BYTES: int = 512

#: Default collection threshold when an encoding guess is requested.
AUTO_ENCODING_GUESS_MIN_BYTES: int = 512 * 8

#: Upper bound of the sample handed to the statistical guesser.
AUTO_ENCODING_GUESS_MAX_BYTES: int = 512 * 128


def _validate_min_bytes(min_bytes: int) -> None:
    """Raise ValueError if *min_bytes* is not a positive integer."""
    if isinstance(min_bytes, bool) or not isinstance(min_bytes, int) or min_bytes < 1:
        msg = "min_bytes_required_for_detection must be a positive integer"
        raise ValueError(msg)


def _resolve_min_bytes(min_bytes: int | None, guess_encoding: bool) -> int:
    """Return the collection threshold, filling in the default for *None*."""
    if min_bytes is None:
        if guess_encoding:
            return AUTO_ENCODING_GUESS_MIN_BYTES
        return NO_ENCODING_GUESS_MIN_BYTES
    _validate_min_bytes(min_bytes)
    return min_bytes


class _SyncSource(Generic[T]):
    """Async iterator view of a synchronous iterable.

    :meth:`aclose` forwards to the wrapped iterator's ``close()`` so that
    generators are finalised even if they were never advanced.
    """

    __slots__ = ("_iterator",)

    def __init__(self, iterable: Iterable[T]) -> None:
        self._iterator = iter(iterable)

    def __aiter__(self) -> _SyncSource[T]:
        return self

    async def __anext__(self) -> T:
        try:
            return next(self._iterator)
        except StopIteration:
            raise StopAsyncIteration from None

    async def aclose(self) -> None:
        close = getattr(self._iterator, "close", None)
        if close is not None:
            close()


def _as_async_iterator(source: Source[T]) -> AsyncIterator[T] | _SyncSource[T]:
    """Return a single async iterator over *source*."""
    if isinstance(source, AsyncIterable):
        return aiter(source)
    if isinstance(source, Iterable) and not isinstance(source, (bytes, str)):
        return _SyncSource(source)
    msg = f"expected an iterable of chunks, got {type(source).__name__}"
    raise TypeError(msg)


async def _close_source(iterator: AsyncIterator[T]) -> None:
    """Release *iterator* if it supports explicit closing."""
    aclose = getattr(iterator, "aclose", None)
    if aclose is not None:
        await aclose()
