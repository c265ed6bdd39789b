# tests/conftest.py
"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

CSS_TEXT = (
    "/*----------------------------------------------------------\n"
    "The base color for this template is #5c87b2. If you'd like\n"
    "to use a different color start by replacing all instances of\n"
    "#5c87b2 with your new color.\n"
    "----------------------------------------------------------*/\n"
    "body\n"
    "{\n"
    "    background-color: #5c87b2;\n"
    "    font-size: .75em;\n"
    '    font-family: Segoe UI, Verdana, Helvetica, Sans-Serif;\n'
    "    margin: 8px;\n"
    "    padding: 0;\n"
    "    color: #696969;\n"
    "}\n"
)

#: Name -> raw file content.
FIXTURES: dict[str, bytes] = {
    "empty.txt": b"",
    "some_ansi.css": CSS_TEXT.encode("ascii"),
    "some_utf8.css": b"\xef\xbb\xbf" + CSS_TEXT.encode("utf-8"),
    "some_utf16le.css": b"\xff\xfe" + CSS_TEXT.encode("utf-16-le"),
    "some_utf16be.css": b"\xfe\xff" + CSS_TEXT.encode("utf-16-be"),
    "utf16_le_nobom.txt": CSS_TEXT.encode("utf-16-le"),
    "utf16_be_nobom.txt": CSS_TEXT.encode("utf-16-be"),
    "some.png.txt": (
        b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x10\x00\x00\x00\x10"
        b"\x08\x06\x00\x00\x00\x1f\xf3\xffa" + bytes(range(256))
    ),
    "some.json.png": b'{"name": "codecstream", "binary": false}\n' * 20,
}


@pytest.fixture
def fixtures_dir(tmp_path: Path) -> Path:
    """Directory holding every file of :data:`FIXTURES`."""
    for name, content in FIXTURES.items():
        (tmp_path / name).write_bytes(content)
    return tmp_path


@pytest.fixture
def css_text() -> str:
    """Text content of the ``some_*.css`` fixtures."""
    return CSS_TEXT
