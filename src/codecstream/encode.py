"""Encode stream pipeline: text in, bytes of a chosen encoding out."""

from __future__ import annotations

from typing import TYPE_CHECKING

from codecstream._utils import Source, _as_async_iterator, _close_source
from codecstream.errors import UnsupportedEncodingError
from codecstream.registry import DEFAULT_REGISTRY

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable, Iterator

    from codecstream.registry import CharsetRegistry


def _resolve_bom(registry: CharsetRegistry, encoding: str, add_bom: bool) -> bytes | None:
    if not registry.exists(encoding):
        raise UnsupportedEncodingError(encoding)
    if not add_bom:
        return None
    bom = registry.bom(encoding)
    if bom is None:
        msg = f"encoding {encoding!r} has no byte-order mark"
        raise ValueError(msg)
    return bom


def to_encode_readable(
    source: Iterable[str],
    encoding: str,
    *,
    add_bom: bool = False,
    registry: CharsetRegistry | None = None,
) -> Iterator[bytes]:
    """Encode the text units of *source* into *encoding*.

    The encoding is validated immediately, before anything is read from
    *source*.  With *add_bom* the first item produced is the byte-order
    mark, emitted before the first text unit is pulled.  Every text unit is
    encoded on its own into a complete byte sequence; empty units are
    skipped.

    :param source: Text units, e.g. a list of strings or a generator.
    :param encoding: Target encoding, e.g. ``"utf16be"``.
    :param add_bom: Prefix the output with the encoding's byte-order mark.
    :param registry: Replaces the default charset registry.
    :raises UnsupportedEncodingError: If *encoding* is unknown.
    :raises ValueError: If *add_bom* is set for an encoding without a BOM.
    """
    if isinstance(source, str):
        msg = "expected an iterable of text units, got a single str"
        raise TypeError(msg)
    registry = registry or DEFAULT_REGISTRY
    bom = _resolve_bom(registry, encoding, add_bom)
    return _encode_units(source, encoding, bom, registry)


def _encode_units(
    source: Iterable[str],
    encoding: str,
    bom: bytes | None,
    registry: CharsetRegistry,
) -> Iterator[bytes]:
    if bom is not None:
        yield bom
    texts = iter(source)
    try:
        for text in texts:
            if text:
                yield registry.encode(text, encoding)
    finally:
        close = getattr(texts, "close", None)
        if close is not None:
            close()


def to_encode_stream(
    source: Source[str],
    encoding: str,
    *,
    add_bom: bool = False,
    registry: CharsetRegistry | None = None,
) -> AsyncIterator[bytes]:
    """Async variant of :func:`to_encode_readable`.

    *source* may be an async or a plain iterable of text units.  Validation
    still happens at call time.
    """
    registry = registry or DEFAULT_REGISTRY
    bom = _resolve_bom(registry, encoding, add_bom)
    return _aencode_units(_as_async_iterator(source), encoding, bom, registry)


async def _aencode_units(
    texts: AsyncIterator[str],
    encoding: str,
    bom: bytes | None,
    registry: CharsetRegistry,
) -> AsyncIterator[bytes]:
    try:
        if bom is not None:
            yield bom
        async for text in texts:
            if text:
                yield registry.encode(text, encoding)
    finally:
        await _close_source(texts)
