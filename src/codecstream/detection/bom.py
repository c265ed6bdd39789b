"""Byte-order mark detection."""

from __future__ import annotations

from codecstream.registry import (
    UTF8_BOM,
    UTF8_WITH_BOM,
    UTF16BE,
    UTF16BE_BOM,
    UTF16LE,
    UTF16LE_BOM,
)

# The 2-byte UTF-16 marks are tested before the 3-byte UTF-8 mark so that a
# 2-byte prefix is enough to recognise them.
_BOMS: tuple[tuple[bytes, str], ...] = (
    (UTF16LE_BOM, UTF16LE),
    (UTF16BE_BOM, UTF16BE),
    (UTF8_BOM, UTF8_WITH_BOM),
)


def detect_encoding_by_bom_from_buffer(
    data: bytes | bytearray | memoryview | None, bytes_read: int | None = None
) -> str | None:
    """Return the encoding announced by a BOM at the start of *data*.

    :param data: Leading bytes of the content, or ``None``.
    :param bytes_read: How many bytes of *data* are valid.  Defaults to
        ``len(data)``; useful when *data* is a partially filled buffer.
    :returns: ``"utf16le"``, ``"utf16be"``, ``"utf8bom"`` or ``None``.
    """
    if data is None:
        return None
    prefix = bytes(data[:3] if bytes_read is None else data[: min(bytes_read, 3)])
    if len(prefix) < 2:
        return None
    for bom_bytes, encoding in _BOMS:
        if prefix.startswith(bom_bytes):
            return encoding
    return None
