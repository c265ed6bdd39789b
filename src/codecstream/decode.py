"""Decode stream pipeline: bytes of unknown encoding in, text out.

The pipeline buffers a bounded prefix of the byte source, decides on an
encoding exactly once, then streams the buffered prefix and every later
chunk through a single incremental decoder.  The decoder carries incomplete
multi-byte sequences over to the next chunk, so the decoded text does not
depend on where the source happened to split its chunks.
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import TYPE_CHECKING

from codecstream._utils import (
    MAX_BOM_LENGTH,
    Source,
    _as_async_iterator,
    _close_source,
    _resolve_min_bytes,
    _validate_min_bytes,
)
from codecstream.detection import DetectionResult
from codecstream.detection.orchestrator import detect_encoding_from_buffer
from codecstream.enums import DecodeState, DecodeStreamErrorKind
from codecstream.errors import DecodeStreamError, UnsupportedEncodingError
from codecstream.registry import DEFAULT_REGISTRY, UTF8

if TYPE_CHECKING:
    import codecs

    from codecstream.detection import EncodingGuesser
    from codecstream.registry import CharsetRegistry

#: Strategy deciding the final encoding from the detection result.
OverwriteEncoding = Callable[[DetectionResult], Awaitable[str] | str]


async def _default_overwrite_encoding(detected: DetectionResult) -> str:
    return detected.encoding or UTF8


@dataclasses.dataclass(frozen=True, slots=True)
class DecodeOptions:
    """Settings of one decode stream.

    :param accept_text_only: Refuse streams classified as binary with
        :attr:`DecodeStreamErrorKind.STREAM_IS_BINARY`.
    :param guess_encoding: Ask the statistical guesser when there is no
        byte-order mark and no UTF-16 pattern.
    :param min_bytes_required_for_detection: Bytes to buffer before deciding.
        ``None`` means 4096 when guessing and 512 otherwise.
    :param overwrite_encoding: Called exactly once with the
        :class:`DetectionResult`; returns (or resolves to) the encoding used
        for decoding.  Defaults to the detected encoding, else UTF-8.
    :param guesser: Replaces the chardet-based default guesser.
    :param registry: Replaces the default :class:`~codecstream.registry.CodecsRegistry`.
    """

    accept_text_only: bool = False
    guess_encoding: bool = False
    min_bytes_required_for_detection: int | None = None
    overwrite_encoding: OverwriteEncoding = _default_overwrite_encoding
    guesser: EncodingGuesser | None = None
    registry: CharsetRegistry | None = None

    def __post_init__(self) -> None:
        if self.min_bytes_required_for_detection is not None:
            _validate_min_bytes(self.min_bytes_required_for_detection)

    @property
    def detection_threshold(self) -> int:
        """Number of bytes buffered before the encoding is decided."""
        return _resolve_min_bytes(
            self.min_bytes_required_for_detection, self.guess_encoding
        )


@dataclasses.dataclass(slots=True)
class DecodeStreamResult:
    """Detection outcome plus the text stream that is still being decoded.

    Iterate :attr:`stream` with ``async for`` to receive decoded text.
    Leaving an ``async with`` block (or calling :meth:`aclose`) releases the
    stream and its byte source even if the stream was never consumed.
    """

    detected: DetectionResult
    encoding: str
    stream: AsyncIterator[str]
    _source: AsyncIterator[bytes] = dataclasses.field(repr=False)

    async def aclose(self) -> None:
        """Stop decoding and release the byte source."""
        aclose = getattr(self.stream, "aclose", None)
        if aclose is not None:
            await aclose()
        await _close_source(self._source)

    async def __aenter__(self) -> DecodeStreamResult:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


class _DecodePipeline:
    """Per-call state of a decode stream."""

    def __init__(self, source: Source[bytes], options: DecodeOptions) -> None:
        self.logger = logging.getLogger(__name__)
        self.state = DecodeState.COLLECTING
        self._source = _as_async_iterator(source)
        self._options = options
        self._registry = options.registry or DEFAULT_REGISTRY
        # Never decide before a complete BOM could have arrived.
        self._threshold = max(options.detection_threshold, MAX_BOM_LENGTH)
        self._chunks: list[bytes] = []
        self._buffered = 0
        self._exhausted = False

    async def run(self) -> DecodeStreamResult:
        try:
            await self._collect()
            detected, encoding, decoder, payload = await self._decide()
        except BaseException:
            self._set_state(DecodeState.ERRORED)
            await _close_source(self._source)
            raise

        self._set_state(DecodeState.DECODING)
        return DecodeStreamResult(
            detected=detected,
            encoding=encoding,
            stream=self._decode(decoder, payload),
            _source=self._source,
        )

    def _set_state(self, state: DecodeState) -> None:
        self.logger.debug("decode stream: %s -> %s", self.state.value, state.value)
        self.state = state

    async def _collect(self) -> None:
        async for chunk in self._source:
            self._chunks.append(chunk)
            self._buffered += len(chunk)
            if self._buffered >= self._threshold:
                break
        else:
            self._exhausted = True

    async def _decide(
        self,
    ) -> tuple[DetectionResult, str, codecs.IncrementalDecoder, bytes]:
        self._set_state(DecodeState.DECIDING)
        options = self._options
        data = b"".join(self._chunks)
        self._chunks.clear()

        detected = detect_encoding_from_buffer(
            data, options.guess_encoding, guesser=options.guesser
        )
        self.logger.debug(
            "detected %s from %d buffered bytes (source exhausted: %s)",
            detected,
            len(data),
            self._exhausted,
        )

        encoding = options.overwrite_encoding(detected)
        if inspect.isawaitable(encoding):
            encoding = await encoding

        if options.accept_text_only and detected.seems_binary:
            msg = "Stream is binary but only text is accepted for decoding"
            raise DecodeStreamError(msg, DecodeStreamErrorKind.STREAM_IS_BINARY)

        try:
            decoder = self._registry.get_decoder(encoding)
        except UnsupportedEncodingError as e:
            raise DecodeStreamError(
                str(e), DecodeStreamErrorKind.UNSUPPORTED_ENCODING
            ) from e

        bom = self._registry.bom(encoding)
        if bom is not None and data.startswith(bom):
            data = data[len(bom) :]
        return detected, encoding, decoder, data

    async def _decode(
        self, decoder: codecs.IncrementalDecoder, payload: bytes
    ) -> AsyncIterator[str]:
        try:
            text = decoder.decode(payload)
            if text:
                yield text
            if not self._exhausted:
                async for chunk in self._source:
                    text = decoder.decode(chunk)
                    if text:
                        yield text
            text = decoder.decode(b"", final=True)
            if text:
                yield text
        except Exception:
            self._set_state(DecodeState.ERRORED)
            raise
        finally:
            if self.state is DecodeState.DECODING:
                self._set_state(DecodeState.CLOSED)
            await _close_source(self._source)


async def to_decode_stream(
    source: Source[bytes], options: DecodeOptions | None = None
) -> DecodeStreamResult:
    """Detect the encoding of *source* and start decoding it.

    Returns once the encoding has been decided; the decoded text is then
    pulled from :attr:`DecodeStreamResult.stream`.  Errors of the byte source
    are raised here while the encoding is still being decided, and from the
    stream afterwards.

    :param source: Byte chunks, as an async or a plain iterable.
    :param options: Decode settings, e.g.
        ``to_decode_stream(src, DecodeOptions(accept_text_only=True))``.
        Defaults to :class:`DecodeOptions` with every field at its default.
    :raises DecodeStreamError: If the stream is binary while only text is
        accepted, or the resolved encoding is unsupported.  Nothing has been
        decoded in either case and the source has been released.
    """
    return await _DecodePipeline(source, options or DecodeOptions()).run()


async def decode_all(
    source: Source[bytes], options: DecodeOptions | None = None
) -> tuple[DetectionResult, str]:
    """Decode *source* completely and return the detection result and text."""
    result = await to_decode_stream(source, options)
    async with result:
        parts = [text async for text in result.stream]
    return result.detected, "".join(parts)
