"""Charset registry: supported encodings, byte-order marks and codec access.

Encodings are addressed by a canonical id (``"utf8"``, ``"utf16le"``,
``"windows1252"``, ...): the lower-cased name with every non-alphanumeric
character removed.  Names outside the catalogue are passed through to
Python's codec machinery, so ``"latin-1"`` or ``"cp932"`` work as well.
"""

from __future__ import annotations

import codecs
import dataclasses
import re
from typing import Protocol

from codecstream.errors import UnsupportedEncodingError

UTF8 = "utf8"
UTF8_WITH_BOM = "utf8bom"
UTF16LE = "utf16le"
UTF16BE = "utf16be"

UTF8_BOM = b"\xef\xbb\xbf"
UTF16LE_BOM = b"\xff\xfe"
UTF16BE_BOM = b"\xfe\xff"

_NON_ALNUM = re.compile(r"[^a-z0-9]")


@dataclasses.dataclass(frozen=True, slots=True)
class EncodingInfo:
    """Metadata for a catalogued encoding.

    :param name: Canonical id, e.g. ``"utf16le"``.
    :param python_codec: Codec name understood by :func:`codecs.lookup`.
    :param bom: Byte-order mark written for this encoding, if it has one.
    :param aliases: Additional normalized names resolving to this entry.
    """

    name: str
    python_codec: str
    bom: bytes | None = None
    aliases: tuple[str, ...] = ()


REGISTRY: tuple[EncodingInfo, ...] = (
    EncodingInfo(UTF8, "utf-8", UTF8_BOM),
    EncodingInfo(UTF8_WITH_BOM, "utf-8", UTF8_BOM, ("utf8sig",)),
    EncodingInfo(UTF16LE, "utf-16-le", UTF16LE_BOM),
    EncodingInfo(UTF16BE, "utf-16-be", UTF16BE_BOM),
    EncodingInfo("windows1252", "cp1252", aliases=("cp1252",)),
    EncodingInfo("iso88591", "latin-1", aliases=("latin1",)),
    EncodingInfo("iso88593", "iso8859-3"),
    EncodingInfo("iso885915", "iso8859-15"),
    EncodingInfo("macroman", "mac-roman"),
    EncodingInfo("cp437", "cp437", aliases=("ibm437",)),
    EncodingInfo("windows1256", "cp1256", aliases=("cp1256",)),
    EncodingInfo("iso88596", "iso8859-6"),
    EncodingInfo("windows1257", "cp1257", aliases=("cp1257",)),
    EncodingInfo("iso88594", "iso8859-4"),
    EncodingInfo("iso885914", "iso8859-14"),
    EncodingInfo("windows1250", "cp1250", aliases=("cp1250",)),
    EncodingInfo("iso88592", "iso8859-2"),
    EncodingInfo("cp852", "cp852", aliases=("ibm852",)),
    EncodingInfo("windows1251", "cp1251", aliases=("cp1251",)),
    EncodingInfo("cp866", "cp866", aliases=("ibm866",)),
    EncodingInfo("cp1125", "cp1125"),
    EncodingInfo("iso88595", "iso8859-5"),
    EncodingInfo("koi8r", "koi8-r"),
    EncodingInfo("koi8u", "koi8-u"),
    EncodingInfo("iso885913", "iso8859-13"),
    EncodingInfo("windows1253", "cp1253", aliases=("cp1253",)),
    EncodingInfo("iso88597", "iso8859-7"),
    EncodingInfo("windows1255", "cp1255", aliases=("cp1255",)),
    EncodingInfo("iso88598", "iso8859-8"),
    EncodingInfo("iso885910", "iso8859-10"),
    EncodingInfo("iso885916", "iso8859-16"),
    EncodingInfo("windows1254", "cp1254", aliases=("cp1254",)),
    EncodingInfo("iso88599", "iso8859-9"),
    EncodingInfo("windows1258", "cp1258", aliases=("cp1258",)),
    EncodingInfo("gbk", "gbk"),
    EncodingInfo("gb18030", "gb18030"),
    EncodingInfo("cp950", "cp950", aliases=("big5",)),
    EncodingInfo("big5hkscs", "big5hkscs"),
    EncodingInfo("shiftjis", "shift_jis", aliases=("sjis",)),
    EncodingInfo("eucjp", "euc_jp"),
    EncodingInfo("euckr", "euc_kr"),
    EncodingInfo("windows874", "cp874", aliases=("cp874", "tis620")),
    EncodingInfo("iso885911", "iso8859-11"),
    EncodingInfo("koi8t", "koi8_t"),
    EncodingInfo("gb2312", "gb2312"),
    EncodingInfo("cp865", "cp865", aliases=("ibm865",)),
    EncodingInfo("cp850", "cp850", aliases=("ibm850",)),
)

#: Canonical id -> entry.
SUPPORTED_ENCODINGS: dict[str, EncodingInfo] = {info.name: info for info in REGISTRY}

_BY_NORMALIZED_NAME: dict[str, EncodingInfo] = {
    **{alias: info for info in REGISTRY for alias in info.aliases},
    **SUPPORTED_ENCODINGS,
}


def normalize_encoding(name: str) -> str:
    """Lower-case *name* and drop every non-alphanumeric character."""
    return _NON_ALNUM.sub("", name.lower())


def lookup(name: str) -> EncodingInfo | None:
    """Return the catalogue entry for *name*, or ``None`` if it has none."""
    return _BY_NORMALIZED_NAME.get(normalize_encoding(name))


def to_python_codec(name: str) -> str:
    """Map *name* to the codec name Python's :mod:`codecs` should use."""
    info = lookup(name)
    if info is not None:
        return info.python_codec
    return name


class CharsetRegistry(Protocol):
    """Encode/decode capability consumed by the stream pipelines."""

    def exists(self, name: str) -> bool:
        """Return whether *name* can be used to encode and decode."""

    def bom(self, name: str) -> bytes | None:
        """Return the byte-order mark of *name*, or ``None``."""

    def decode(self, data: bytes, name: str) -> str:
        """Decode *data* in one go."""

    def encode(self, text: str, name: str) -> bytes:
        """Encode *text* in one go."""

    def get_decoder(self, name: str) -> codecs.IncrementalDecoder:
        """Return a fresh incremental decoder for *name*."""


class CodecsRegistry:
    """Charset registry backed by the standard :mod:`codecs` module.

    Malformed input decodes to U+FFFD and unencodable characters become the
    codec's replacement byte (usually ``?``), so neither direction raises on
    content.  Unknown names raise :class:`UnsupportedEncodingError`.
    """

    def exists(self, name: str) -> bool:
        try:
            self._codec(name)
        except UnsupportedEncodingError:
            return False
        return True

    def bom(self, name: str) -> bytes | None:
        info = lookup(name)
        if info is None:
            return None
        return info.bom

    def decode(self, data: bytes, name: str) -> str:
        codec = self._codec(name)
        bom = self.bom(name)
        if bom is not None and data.startswith(bom):
            data = data[len(bom) :]
        return data.decode(codec, errors="replace")

    def encode(self, text: str, name: str) -> bytes:
        return text.encode(self._codec(name), errors="replace")

    def get_decoder(self, name: str) -> codecs.IncrementalDecoder:
        return codecs.getincrementaldecoder(self._codec(name))(errors="replace")

    @staticmethod
    def _codec(name: str) -> str:
        """Resolve *name* to a Python text codec or raise."""
        if not isinstance(name, str):
            raise UnsupportedEncodingError(name)
        codec = to_python_codec(name)
        try:
            # Round-trips through the str <-> bytes API so that non-text
            # codecs such as "rot13" or "base64" are rejected as well.
            b"".decode(codec)
            signature = "".encode(codec)
        except LookupError:
            raise UnsupportedEncodingError(name) from None
        # Codecs such as "utf-16" or "utf-32" prefix every encode() call with
        # their own BOM; only explicit-endian catalogue entries are usable.
        if signature:
            raise UnsupportedEncodingError(name)
        return codec


#: Shared default registry; it holds no mutable state.
DEFAULT_REGISTRY: CharsetRegistry = CodecsRegistry()


def encoding_exists(name: str) -> bool:
    """Return whether the default registry supports *name*."""
    return DEFAULT_REGISTRY.exists(name)


def get_bom(name: str) -> bytes | None:
    """Return the byte-order mark the default registry writes for *name*."""
    return DEFAULT_REGISTRY.bom(name)


def decode(data: bytes, name: str) -> str:
    """Decode *data* with the default registry, dropping a leading BOM."""
    return DEFAULT_REGISTRY.decode(data, name)


def encode(text: str, name: str) -> bytes:
    """Encode *text* with the default registry."""
    return DEFAULT_REGISTRY.encode(text, name)
