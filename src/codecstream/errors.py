"""Exception types raised by codecstream."""

from __future__ import annotations

from codecstream.enums import DecodeStreamErrorKind


class CodecStreamError(Exception):
    """Base class for all codecstream errors."""


class UnsupportedEncodingError(CodecStreamError, LookupError):
    """The charset registry cannot encode or decode the named encoding."""

    def __init__(self, encoding: object) -> None:
        super().__init__(f"unsupported encoding: {encoding!r}")
        self.encoding = encoding


class DecodeStreamError(CodecStreamError):
    """A decode stream was rejected during encoding detection.

    :attr:`kind` tells the cases apart, e.g.
    :attr:`DecodeStreamErrorKind.STREAM_IS_BINARY`.
    """

    def __init__(self, message: str, kind: DecodeStreamErrorKind) -> None:
        super().__init__(message)
        self.kind = kind
