"""Detection orchestrator: BOM first, heuristics second."""

from __future__ import annotations

from typing import TYPE_CHECKING

from codecstream.detection import DetectionResult
from codecstream.detection.binary import classify
from codecstream.detection.bom import detect_encoding_by_bom_from_buffer

if TYPE_CHECKING:
    from codecstream.detection import EncodingGuesser


def detect_encoding_from_buffer(
    data: bytes | bytearray | memoryview,
    guess_encoding: bool = False,
    *,
    guesser: EncodingGuesser | None = None,
) -> DetectionResult:
    """Detect the encoding of the leading bytes of some content.

    A byte-order mark is authoritative: the result names its encoding and
    is never flagged binary, whatever follows the mark.  Without one the
    sample goes through :func:`~codecstream.detection.binary.classify`.

    :param data: Leading bytes of the content.
    :param guess_encoding: Whether to ask the statistical guesser when
        nothing else identifies the encoding.
    :param guesser: Replaces the chardet-based default guesser.
    :returns: A :class:`DetectionResult`.
    """
    bom_encoding = detect_encoding_by_bom_from_buffer(data)
    if bom_encoding is not None:
        return DetectionResult(encoding=bom_encoding, seems_binary=False)
    return classify(data, guess_encoding, guesser=guesser)
