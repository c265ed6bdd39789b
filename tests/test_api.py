# tests/test_api.py
from __future__ import annotations

import asyncio

import pytest

import codecstream
from codecstream import (
    DecodeStreamErrorKind,
    DetectionResult,
    UnsupportedEncodingError,
)


def test_public_names_are_exported():
    for name in codecstream.__all__:
        assert hasattr(codecstream, name), name


def test_version():
    assert codecstream.__version__.count(".") == 2


def test_error_kind_values():
    assert DecodeStreamErrorKind.STREAM_IS_BINARY == 1
    assert DecodeStreamErrorKind.UNSUPPORTED_ENCODING == 2


def test_errors_share_a_base_class():
    assert issubclass(codecstream.DecodeStreamError, codecstream.CodecStreamError)
    assert issubclass(UnsupportedEncodingError, codecstream.CodecStreamError)
    assert issubclass(UnsupportedEncodingError, LookupError)


def test_detection_result_to_dict():
    assert DetectionResult("utf16le").to_dict() == {
        "encoding": "utf16le",
        "seems_binary": False,
    }


def test_detection_result_is_frozen():
    with pytest.raises(AttributeError):
        DetectionResult(None).encoding = "utf8"  # type: ignore[misc]


def test_detect_then_decode_then_encode():
    data = "Ünïcödé text\n".encode("utf-16-le")

    async def run():
        result = await codecstream.to_decode_stream(
            [data[:5], data[5:]], codecstream.DecodeOptions(accept_text_only=True)
        )
        async with result:
            encoded = [
                chunk
                async for chunk in codecstream.to_encode_stream(
                    result.stream, codecstream.UTF8_WITH_BOM, add_bom=True
                )
            ]
        return result.detected, b"".join(encoded)

    detected, output = asyncio.run(run())
    assert detected == DetectionResult(codecstream.UTF16LE, False)
    assert output == codecstream.UTF8_BOM + "Ünïcödé text\n".encode()


def test_custom_registry_is_used():
    class UpperRegistry(codecstream.CodecsRegistry):
        def get_decoder(self, name):
            decoder = super().get_decoder(name)
            original = decoder.decode

            def decode(data, final=False):
                return original(data, final).upper()

            decoder.decode = decode
            return decoder

        def encode(self, text, name):
            return super().encode(text.lower(), name)

    registry = UpperRegistry()
    _, text = asyncio.run(
        codecstream.decode_all([b"abc"], codecstream.DecodeOptions(registry=registry))
    )
    assert text == "ABC"
    output = b"".join(codecstream.to_encode_readable(["XYZ"], "utf8", registry=registry))
    assert output == b"xyz"
