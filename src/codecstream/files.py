"""File-level helpers: bounded reads and the byte-order mark probe."""

from __future__ import annotations

import errno
import logging
import os
from pathlib import Path

from codecstream._utils import MAX_BOM_LENGTH
from codecstream.detection.bom import detect_encoding_by_bom_from_buffer

logger = logging.getLogger(__name__)


def read_exactly(path: str | os.PathLike[str], total_bytes: int) -> bytes:
    """Read up to *total_bytes* from the start of *path*.

    Short reads are retried until *total_bytes* have arrived or the file
    ends, so the result is only shorter than requested for short files.

    :raises OSError: If the file cannot be opened or read.
    """
    buffer = bytearray()
    with Path(path).open("rb") as f:
        while len(buffer) < total_bytes:
            chunk = f.read(total_bytes - len(buffer))
            if not chunk:
                break
            buffer.extend(chunk)
    return bytes(buffer)


def detect_encoding_by_bom(path: str | os.PathLike[str]) -> str | None:
    """Return the encoding announced by a byte-order mark at the start of *path*.

    Detection is best effort: a missing or unreadable file is reported as
    having no BOM.  A directory is the one exception, because callers must
    be able to tell it apart from an empty file.

    :returns: ``"utf8bom"``, ``"utf16le"``, ``"utf16be"`` or ``None``.
    :raises IsADirectoryError: If *path* is a directory.
    """
    try:
        data = read_exactly(path, MAX_BOM_LENGTH)
    except IsADirectoryError:
        raise
    except OSError as e:
        # Windows reports directories as PermissionError.
        if Path(path).is_dir():
            raise IsADirectoryError(
                errno.EISDIR, os.strerror(errno.EISDIR), os.fspath(path)
            ) from e
        logger.debug("BOM probe of %s failed, assuming no BOM: %s", path, e)
        return None
    return detect_encoding_by_bom_from_buffer(data)
