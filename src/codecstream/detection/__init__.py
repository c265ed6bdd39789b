"""Encoding detection stages and shared types."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable

#: Statistical guesser: maps a byte sample to an encoding name or ``None``.
EncodingGuesser = Callable[[bytes], str | None]


@dataclasses.dataclass(frozen=True, slots=True)
class DetectionResult:
    """Outcome of classifying the leading bytes of a stream.

    ``encoding`` is ``None`` when there was no byte-order mark, no UTF-16
    pattern and no confident guess (or guessing was disabled); callers then
    fall back to their default encoding.
    """

    encoding: str | None
    seems_binary: bool = False

    def to_dict(self) -> dict[str, str | bool | None]:
        """Convert this result to a plain dict.

        :returns: A dict with ``'encoding'`` and ``'seems_binary'`` keys.
        """
        return {
            "encoding": self.encoding,
            "seems_binary": self.seems_binary,
        }
