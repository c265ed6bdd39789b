# tests/test_binary.py
from __future__ import annotations

import logging
from pathlib import Path

import pytest

from codecstream._utils import (
    AUTO_ENCODING_GUESS_MAX_BYTES,
    ZERO_BYTE_DETECTION_BUFFER_MAX_LEN,
)
from codecstream.detection import DetectionResult
from codecstream.detection.binary import classify, detect_utf16_pattern
from codecstream.detection.orchestrator import detect_encoding_from_buffer

# ---------------------------------------------------------------------------
# Binary heuristic
# ---------------------------------------------------------------------------


def test_empty_input_is_not_binary():
    assert classify(b"") == DetectionResult(encoding=None, seems_binary=False)


def test_plain_ascii_is_not_binary():
    assert classify(b"Hello, world!") == DetectionResult(None, False)


def test_utf8_text_is_not_binary():
    assert classify("Héllo wörld".encode()).seems_binary is False


def test_all_null_bytes_is_binary():
    assert classify(b"\x00" * 100).seems_binary is True


def test_nul_surrounded_text_is_binary():
    data = bytes([0, 0, 0]) + b"Hello World" + bytes([0])
    result = classify(data)
    assert result.seems_binary is True
    assert result.encoding is None


def test_single_nul_byte_is_binary():
    assert classify(b"\x00").seems_binary is True


def test_nul_after_detection_window_is_ignored():
    data = b"a" * ZERO_BYTE_DETECTION_BUFFER_MAX_LEN + b"\x00"
    assert classify(data).seems_binary is False


def test_nul_at_end_of_detection_window_is_binary():
    data = b"a" * (ZERO_BYTE_DETECTION_BUFFER_MAX_LEN - 1) + b"\x00"
    assert classify(data).seems_binary is True


def test_png_saved_as_txt_is_binary(fixtures_dir: Path):
    data = (fixtures_dir / "some.png.txt").read_bytes()[:512]
    assert classify(data).seems_binary is True


def test_json_saved_as_png_is_not_binary(fixtures_dir: Path):
    data = (fixtures_dir / "some.json.png").read_bytes()[:512]
    assert classify(data).seems_binary is False


def test_pdf_is_binary():
    data = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n" + bytes(range(256))
    assert classify(data).seems_binary is True


def test_control_characters_without_nul_are_not_binary():
    # Only NUL bytes count as a binary indicator.
    assert classify(b"\x01\x02\x03\x1b[0m text").seems_binary is False


def test_accepts_bytearray_and_memoryview():
    assert classify(bytearray(b"\x00\x00\x00")).seems_binary is True
    assert classify(memoryview(b"text")).seems_binary is False


# ---------------------------------------------------------------------------
# UTF-16 without BOM
# ---------------------------------------------------------------------------


def test_guess_utf16_le_from_content_without_bom(fixtures_dir: Path):
    data = (fixtures_dir / "utf16_le_nobom.txt").read_bytes()[:512]
    result = classify(data)
    assert result.encoding == "utf16le"
    assert result.seems_binary is False


def test_guess_utf16_be_from_content_without_bom(fixtures_dir: Path):
    data = (fixtures_dir / "utf16_be_nobom.txt").read_bytes()[:512]
    result = classify(data)
    assert result.encoding == "utf16be"
    assert result.seems_binary is False


def test_utf16_le_pattern():
    data = "Hello, this is a test of UTF-16 LE detection.".encode("utf-16-le")
    assert detect_utf16_pattern(data) == "utf16le"


def test_utf16_be_pattern():
    data = "Hello, this is a test of UTF-16 BE detection.".encode("utf-16-be")
    assert detect_utf16_pattern(data) == "utf16be"


def test_utf16_pattern_with_mixed_scripts():
    data = "日本語のテキスト and some ASCII words".encode("utf-16-le")
    assert detect_utf16_pattern(data) == "utf16le"


def test_utf16_pattern_ignores_trailing_odd_byte():
    data = "Hello World".encode("utf-16-le") + b"\x00"
    assert detect_utf16_pattern(data) == "utf16le"


def test_utf16_pattern_odd_length_drops_last_byte():
    assert detect_utf16_pattern(b"A\x00B\x00\x00") == "utf16le"
    assert detect_utf16_pattern(b"A\x00B\x00\x00\x00") is None


def test_utf16_pattern_too_short():
    assert detect_utf16_pattern(b"A\x00") is None


def test_utf16_pattern_rejects_nul_in_both_positions():
    assert detect_utf16_pattern(b"\x00" * 32) is None


def test_utf16_pattern_rejects_scattered_nuls():
    data = bytes([0, 0, 0]) + b"Hello World" + bytes([0])
    assert detect_utf16_pattern(data) is None


# ---------------------------------------------------------------------------
# Statistical guess
# ---------------------------------------------------------------------------


class RecordingGuesser:
    def __init__(self, answer: str | None) -> None:
        self.answer = answer
        self.calls: list[bytes] = []

    def __call__(self, sample: bytes) -> str | None:
        self.calls.append(sample)
        return self.answer


def test_guesser_not_called_without_guess_encoding():
    guesser = RecordingGuesser("windows1252")
    result = classify(b"caf\xe9", guesser=guesser)
    assert result.encoding is None
    assert guesser.calls == []


def test_guesser_answer_is_taken_verbatim():
    guesser = RecordingGuesser("shiftjis")
    result = classify(b"text", True, guesser=guesser)
    assert result == DetectionResult("shiftjis", False)
    assert guesser.calls == [b"text"]


def test_guesser_may_return_none():
    result = classify(b"text", True, guesser=RecordingGuesser(None))
    assert result == DetectionResult(None, False)


def test_guesser_not_called_for_binary():
    guesser = RecordingGuesser("windows1252")
    result = classify(b"\x00\x01\x00\x00\x02", True, guesser=guesser)
    assert result.seems_binary is True
    assert guesser.calls == []


def test_guesser_not_called_for_utf16_pattern():
    guesser = RecordingGuesser("windows1252")
    data = "Hello World".encode("utf-16-be")
    result = classify(data, True, guesser=guesser)
    assert result.encoding == "utf16be"
    assert guesser.calls == []


def test_guesser_sample_is_bounded():
    guesser = RecordingGuesser(None)
    classify(b"a" * (AUTO_ENCODING_GUESS_MAX_BYTES + 100), True, guesser=guesser)
    assert len(guesser.calls[0]) == AUTO_ENCODING_GUESS_MAX_BYTES


def test_failing_guesser_counts_as_no_guess(caplog: pytest.LogCaptureFixture):
    def broken(sample: bytes) -> str | None:
        msg = "model not loaded"
        raise RuntimeError(msg)

    with caplog.at_level(logging.WARNING, logger="codecstream.detection.binary"):
        result = classify(b"text", True, guesser=broken)
    assert result == DetectionResult(None, False)
    assert "guesser failed" in caplog.text


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


def test_bom_takes_precedence_over_binary_heuristic():
    result = detect_encoding_from_buffer(b"\xef\xbb\xbf\x00\x00\x00binary")
    assert result == DetectionResult("utf8bom", False)


def test_bom_skips_guesser():
    guesser = RecordingGuesser("windows1252")
    result = detect_encoding_from_buffer(b"\xff\xfeH\x00i\x00", True, guesser=guesser)
    assert result.encoding == "utf16le"
    assert guesser.calls == []


def test_without_bom_falls_back_to_classifier():
    guesser = RecordingGuesser("windows1252")
    result = detect_encoding_from_buffer(b"caf\xe9 cr\xe8me", True, guesser=guesser)
    assert result == DetectionResult("windows1252", False)


def test_without_bom_binary_is_flagged():
    result = detect_encoding_from_buffer(bytes([0, 0, 0]) + b"Hello World" + bytes([0]))
    assert result == DetectionResult(None, True)
