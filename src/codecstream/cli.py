"""Command-line interface for codecstream."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Awaitable, Callable, Iterator
from pathlib import Path

import codecstream
from codecstream._utils import AUTO_ENCODING_GUESS_MIN_BYTES
from codecstream.decode import DecodeOptions, to_decode_stream
from codecstream.detection import DetectionResult
from codecstream.detection.orchestrator import detect_encoding_from_buffer
from codecstream.encode import to_encode_stream
from codecstream.errors import CodecStreamError
from codecstream.files import read_exactly
from codecstream.registry import UTF8

#: Environment variable supplying the default for ``--encoding``.
ENCODING_ENV_VAR = "CODECSTREAM_ENCODING"

_CHUNK_SIZE = 64 * 1024

logger = logging.getLogger(__name__)


def _iter_chunks(path: str | None, chunk_size: int = _CHUNK_SIZE) -> Iterator[bytes]:
    """Yield the bytes of *path* (stdin for ``None``) in chunks."""
    if path is None:
        while chunk := sys.stdin.buffer.read(chunk_size):
            yield chunk
        return
    with Path(path).open("rb") as f:
        while chunk := f.read(chunk_size):
            yield chunk


def _overwrite_with(
    encoding: str | None,
) -> Callable[[DetectionResult], Awaitable[str]]:
    async def overwrite_encoding(detected: DetectionResult) -> str:
        return encoding or detected.encoding or UTF8

    return overwrite_encoding


def _detect(args: argparse.Namespace) -> bool:
    ok = True
    for filepath in args.files:
        try:
            data = read_exactly(filepath, AUTO_ENCODING_GUESS_MIN_BYTES)
        except OSError as e:
            print(f"codecstream: {filepath}: {e}", file=sys.stderr)
            ok = False
            continue
        detected = detect_encoding_from_buffer(data, args.guess)
        if args.minimal:
            print(detected.encoding)
        else:
            suffix = " (binary)" if detected.seems_binary else ""
            print(f"{filepath}: {detected.encoding}{suffix}")
    return ok


async def _decode(args: argparse.Namespace) -> None:
    options = DecodeOptions(
        accept_text_only=args.text_only,
        guess_encoding=args.guess,
        min_bytes_required_for_detection=args.min_bytes,
        overwrite_encoding=_overwrite_with(args.encoding),
    )
    result = await to_decode_stream(_iter_chunks(args.file), options)
    logger.info("decoding %s as %s", args.file or "stdin", result.encoding)
    async with result:
        async for text in result.stream:
            sys.stdout.write(text)
    sys.stdout.flush()


async def _encode(args: argparse.Namespace) -> None:
    options = DecodeOptions(
        guess_encoding=args.guess,
        overwrite_encoding=_overwrite_with(args.source_encoding),
    )
    result = await to_decode_stream(_iter_chunks(args.file), options)
    logger.info(
        "transcoding %s from %s to %s", args.file or "stdin", result.encoding, args.to
    )
    async with result:
        out = sys.stdout.buffer
        async for data in to_encode_stream(result.stream, args.to, add_bom=args.bom):
            out.write(data)
        out.flush()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codecstream",
        description="Detect, decode and transcode text of unknown encoding.",
    )
    parser.add_argument(
        "--version", action="version", version=f"codecstream {codecstream.__version__}"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log diagnostics to stderr"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    detect = sub.add_parser("detect", help="Report the encoding of files")
    detect.add_argument("files", nargs="+", help="Files to inspect")
    detect.add_argument(
        "--guess", action="store_true", help="Guess encodings without a BOM"
    )
    detect.add_argument(
        "--minimal", action="store_true", help="Output only the encoding name"
    )

    decode = sub.add_parser("decode", help="Decode a file to stdout")
    decode.add_argument("file", nargs="?", help="File to decode (default: stdin)")
    decode.add_argument(
        "-e",
        "--encoding",
        default=os.environ.get(ENCODING_ENV_VAR) or None,
        help=f"Force the encoding (default: ${ENCODING_ENV_VAR} or detected)",
    )
    decode.add_argument(
        "--guess", action="store_true", help="Guess encodings without a BOM"
    )
    decode.add_argument(
        "--text-only", action="store_true", help="Refuse binary content"
    )
    decode.add_argument(
        "--min-bytes",
        type=int,
        default=None,
        help="Bytes to buffer before deciding on the encoding",
    )

    encode = sub.add_parser("encode", help="Transcode a file to stdout")
    encode.add_argument("file", nargs="?", help="File to transcode (default: stdin)")
    encode.add_argument("-t", "--to", required=True, help="Target encoding")
    encode.add_argument(
        "-f",
        "--from",
        dest="source_encoding",
        default=None,
        help="Source encoding (default: detected)",
    )
    encode.add_argument(
        "--guess", action="store_true", help="Guess the source encoding"
    )
    encode.add_argument("--bom", action="store_true", help="Write a byte-order mark")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run the ``codecstream`` command-line tool.

    :param argv: Command-line arguments.  Defaults to ``sys.argv[1:]``.
    """
    args = _build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(name)s: %(message)s", stream=sys.stderr
        )

    if args.command == "detect":
        if not _detect(args):
            sys.exit(1)
        return

    handler = _decode if args.command == "decode" else _encode
    try:
        asyncio.run(handler(args))
    except (CodecStreamError, OSError, ValueError) as e:
        print(f"codecstream: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
