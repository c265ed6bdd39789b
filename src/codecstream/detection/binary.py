"""Binary content detection with BOM-less UTF-16 recognition.

UTF-16 text contains NUL bytes in alternating positions, which would
otherwise make it look binary.  A sample that has NUL bytes is therefore
only classified as binary when they do not follow that pattern.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from codecstream._utils import (
    AUTO_ENCODING_GUESS_MAX_BYTES,
    ZERO_BYTE_DETECTION_BUFFER_MAX_LEN,
)
from codecstream.detection import DetectionResult
from codecstream.registry import UTF16BE, UTF16LE

if TYPE_CHECKING:
    from codecstream.detection import EncodingGuesser

logger = logging.getLogger(__name__)

# Need at least two complete code units to judge the NUL distribution.
_MIN_BYTES_UTF16 = 4

# Minimum fraction of NUL bytes in the expected position for UTF-16.
_UTF16_MIN_NULL_FRACTION = 0.10

# Maximum fraction of NUL bytes tolerated in the opposite position.  Text in
# the other byte order would put them there, binary data puts them anywhere.
_UTF16_MAX_OPPOSITE_NULL_FRACTION = 0.02


def detect_utf16_pattern(sample: bytes) -> str | None:
    """Return ``"utf16le"`` or ``"utf16be"`` if NUL bytes follow a UTF-16 layout.

    NULs at odd offsets are the high bytes of little-endian code units, NULs
    at even offsets those of big-endian ones.  Only one parity may carry a
    significant share of them.

    :param sample: Leading bytes of the content.
    :returns: The matching UTF-16 variant, or ``None``.
    """
    # A trailing odd byte is half a code unit; it is not counted.
    sample_len = len(sample) - len(sample) % 2
    if sample_len < _MIN_BYTES_UTF16:
        return None

    num_units = sample_len // 2
    be_frac = sample[0:sample_len:2].count(0) / num_units
    le_frac = sample[1:sample_len:2].count(0) / num_units

    if (
        le_frac >= _UTF16_MIN_NULL_FRACTION
        and be_frac <= _UTF16_MAX_OPPOSITE_NULL_FRACTION
    ):
        return UTF16LE
    if (
        be_frac >= _UTF16_MIN_NULL_FRACTION
        and le_frac <= _UTF16_MAX_OPPOSITE_NULL_FRACTION
    ):
        return UTF16BE
    return None


def classify(
    sample: bytes | bytearray | memoryview,
    guess_encoding: bool = False,
    *,
    guesser: EncodingGuesser | None = None,
) -> DetectionResult:
    """Classify a BOM-less sample as binary or text and name its encoding.

    Only the first :data:`ZERO_BYTE_DETECTION_BUFFER_MAX_LEN` bytes are
    scanned for NUL bytes.  When *guess_encoding* is set and the sample is
    plain text, the guesser sees at most
    :data:`AUTO_ENCODING_GUESS_MAX_BYTES` bytes and its answer is used as
    is.

    :param sample: Leading bytes of the content (BOM handling is the
        caller's job).
    :param guess_encoding: Whether to ask the statistical guesser.
    :param guesser: Replaces the chardet-based default guesser.
    :returns: A complete :class:`DetectionResult`.
    """
    head = bytes(sample[:ZERO_BYTE_DETECTION_BUFFER_MAX_LEN])
    encoding: str | None = None
    seems_binary = False

    if 0 in head:
        encoding = detect_utf16_pattern(head)
        seems_binary = encoding is None

    if guess_encoding and encoding is None and not seems_binary:
        encoding = _run_guesser(guesser, bytes(sample[:AUTO_ENCODING_GUESS_MAX_BYTES]))

    return DetectionResult(encoding=encoding, seems_binary=seems_binary)


def _run_guesser(guesser: EncodingGuesser | None, sample: bytes) -> str | None:
    """Call *guesser* on *sample*; a failing guesser counts as no answer."""
    if guesser is None:
        from codecstream.detection.guess import guess_encoding_by_buffer

        guesser = guess_encoding_by_buffer
    try:
        return guesser(sample)
    except Exception:  # noqa: BLE001
        logger.warning("encoding guesser failed, ignoring its result", exc_info=True)
        return None
