"""Statistical encoding guess backed by chardet."""

from __future__ import annotations

import logging

import chardet

from codecstream.registry import encoding_exists, lookup, normalize_encoding

logger = logging.getLogger(__name__)

#: Guesses at or below this confidence are discarded.
MINIMUM_THRESHOLD: float = 0.20

# Families never taken from a guess: plain ASCII is left to the caller's
# default, and UTF-16/32 without a BOM is recognised by the NUL-byte pattern
# stage instead.
_IGNORED_PREFIXES: tuple[str, ...] = ("ascii", "utf16", "utf32")


def guess_encoding_by_buffer(sample: bytes) -> str | None:
    """Guess the encoding of *sample* with chardet.

    :param sample: Leading bytes of BOM-less, non-binary content.
    :returns: A canonical registry id such as ``"windows1252"`` or
        ``"shiftjis"``, or ``None`` when chardet has no confident answer or
        suggests an encoding the registry cannot handle.
    """
    if not sample:
        return None

    result = chardet.detect(sample, should_rename_legacy=False)
    guessed = result.get("encoding")
    confidence = result.get("confidence") or 0.0
    logger.debug("chardet guessed %r with confidence %.2f", guessed, confidence)

    if not guessed or confidence <= MINIMUM_THRESHOLD:
        return None

    normalized = normalize_encoding(guessed)
    if normalized.startswith(_IGNORED_PREFIXES):
        return None

    info = lookup(normalized)
    if info is not None:
        return info.name
    if encoding_exists(normalized):
        return normalized
    return None
