"""Enumerations for codecstream."""

import enum


class DecodeStreamErrorKind(enum.IntEnum):
    """Reason a decode stream was refused before producing any text."""

    #: The stream was classified as binary while only text was accepted.
    STREAM_IS_BINARY = 1
    #: The resolved encoding is not known to the charset registry.
    UNSUPPORTED_ENCODING = 2


class DecodeState(enum.Enum):
    """Lifecycle of a single decode pipeline run."""

    COLLECTING = "collecting"
    DECIDING = "deciding"
    DECODING = "decoding"
    CLOSED = "closed"
    ERRORED = "errored"
