"""Streaming text encoding detection and transcoding."""

from __future__ import annotations

from codecstream.decode import (
    DecodeOptions,
    DecodeStreamResult,
    decode_all,
    to_decode_stream,
)
from codecstream.detection import DetectionResult
from codecstream.detection.binary import classify
from codecstream.detection.bom import detect_encoding_by_bom_from_buffer
from codecstream.detection.orchestrator import detect_encoding_from_buffer
from codecstream.encode import to_encode_readable, to_encode_stream
from codecstream.enums import DecodeState, DecodeStreamErrorKind
from codecstream.errors import (
    CodecStreamError,
    DecodeStreamError,
    UnsupportedEncodingError,
)
from codecstream.files import detect_encoding_by_bom, read_exactly
from codecstream.registry import (
    SUPPORTED_ENCODINGS,
    UTF8,
    UTF8_BOM,
    UTF8_WITH_BOM,
    UTF16BE,
    UTF16BE_BOM,
    UTF16LE,
    UTF16LE_BOM,
    CharsetRegistry,
    CodecsRegistry,
    encoding_exists,
    get_bom,
)

__version__ = "1.0.0"
__all__ = [
    "SUPPORTED_ENCODINGS",
    "UTF8",
    "UTF8_BOM",
    "UTF8_WITH_BOM",
    "UTF16BE",
    "UTF16BE_BOM",
    "UTF16LE",
    "UTF16LE_BOM",
    "CharsetRegistry",
    "CodecStreamError",
    "CodecsRegistry",
    "DecodeOptions",
    "DecodeState",
    "DecodeStreamError",
    "DecodeStreamErrorKind",
    "DecodeStreamResult",
    "DetectionResult",
    "UnsupportedEncodingError",
    "classify",
    "decode_all",
    "detect_encoding_by_bom",
    "detect_encoding_by_bom_from_buffer",
    "detect_encoding_from_buffer",
    "encoding_exists",
    "get_bom",
    "read_exactly",
    "to_decode_stream",
    "to_encode_readable",
    "to_encode_stream",
]
