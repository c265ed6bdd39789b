#!/usr/bin/env python
"""Benchmark codecstream: detection, streaming decode and streaming encode.

Can be run standalone for human-readable output, or with ``--json-only`` for
machine-readable JSON.  Without ``--data-dir`` a synthetic corpus is used.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import statistics
import sys
import time
import tracemalloc
from pathlib import Path

_SYNTHETIC = {
    "utf8": "Héllo wörld café résumé naïve façade.\n" * 20_000,
    "utf16le": "Streaming text with 日本語 and emoji 😀.\n" * 20_000,
    "shiftjis": "日本語のテキストです。カタカナとひらがな。\n" * 20_000,
    "windows1252": "Café crème, naïve façade – “quoted”.\n" * 20_000,
}


def _format_bytes(n: int) -> str:
    """Format byte count as human-readable string."""
    if n >= 1 << 20:
        return f"{n / (1 << 20):.1f} MiB"
    if n >= 1 << 10:
        return f"{n / (1 << 10):.1f} KiB"
    return f"{n} B"


def _load_corpus(data_dir: Path | None) -> list[tuple[str, bytes]]:
    from codecstream.registry import to_python_codec

    if data_dir is None:
        return [
            (name, text.encode(to_python_codec(name)))
            for name, text in _SYNTHETIC.items()
        ]
    return [
        (fp.name, fp.read_bytes())
        for fp in sorted(data_dir.rglob("*"))
        if fp.is_file()
    ]


def _split(data: bytes, size: int) -> list[bytes]:
    return [data[i : i + size] for i in range(0, len(data), size)]


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Benchmark codecstream detection and transcoding.",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory of files to benchmark (default: synthetic corpus)",
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=64 * 1024,
        help="Size of the byte chunks fed to the decoder (default: 65536)",
    )
    parser.add_argument(
        "--guess",
        action="store_true",
        default=False,
        help="Enable the statistical encoding guess",
    )
    parser.add_argument(
        "--json-only",
        action="store_true",
        default=False,
        help="Print only JSON output (for consumption by other scripts)",
    )
    args = parser.parse_args()

    data_dir: Path | None = args.data_dir
    if data_dir is not None:
        data_dir = data_dir.resolve()
        if not data_dir.is_dir():
            print(f"ERROR: data directory not found: {data_dir}", file=sys.stderr)
            sys.exit(1)

    # Start tracemalloc early to capture baseline
    tracemalloc.start()

    t0 = time.perf_counter()
    import codecstream

    import_time = time.perf_counter() - t0

    corpus = _load_corpus(data_dir)
    if not corpus:
        print("ERROR: no files found!", file=sys.stderr)
        sys.exit(1)

    baseline_current, _ = tracemalloc.get_traced_memory()
    tracemalloc.reset_peak()

    detect_times: list[float] = []
    decode_times: list[float] = []
    encode_times: list[float] = []
    total_bytes = 0
    total_chars = 0
    for _name, data in corpus:
        total_bytes += len(data)

        ft0 = time.perf_counter()
        detected = codecstream.detect_encoding_from_buffer(data, args.guess)
        detect_times.append(time.perf_counter() - ft0)

        ft0 = time.perf_counter()
        _, text = asyncio.run(
            codecstream.decode_all(
                _split(data, args.chunk_size),
                codecstream.DecodeOptions(guess_encoding=args.guess),
            )
        )
        decode_times.append(time.perf_counter() - ft0)
        total_chars += len(text)

        target = detected.encoding or codecstream.UTF8
        ft0 = time.perf_counter()
        for _ in codecstream.to_encode_readable([text], target):
            pass
        encode_times.append(time.perf_counter() - ft0)

    _, traced_peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()

    decode_total = sum(decode_times)
    encode_total = sum(encode_times)
    results = {
        "num_files": len(corpus),
        "guess": args.guess,
        "chunk_size": args.chunk_size,
        "import_time": import_time,
        "detect_time": sum(detect_times),
        "decode_time": decode_total,
        "encode_time": encode_total,
        "decode_mib_per_s": total_bytes / (1 << 20) / decode_total,
        "encode_mchars_per_s": total_chars / 1e6 / encode_total,
        "traced_peak": traced_peak - baseline_current,
    }

    # Always print JSON
    print(json.dumps(results))

    if not args.json_only:
        detect_ms = [t * 1000 for t in detect_times]
        print()
        print(f"Files:          {len(corpus)} ({_format_bytes(total_bytes)})")
        print(f"  guess:        {args.guess}")
        print(f"  chunk size:   {_format_bytes(args.chunk_size)}")
        print()
        print("Timing:")
        print(f"  Import:       {import_time:.3f}s")
        print(
            f"  Detection:    mean={statistics.mean(detect_ms):.3f}ms"
            f"  median={statistics.median(detect_ms):.3f}ms"
        )
        print(f"  Decode:       {results['decode_mib_per_s']:.1f} MiB/s")
        print(f"  Encode:       {results['encode_mchars_per_s']:.1f} Mchars/s")
        print()
        print("Memory:")
        print(f"  Traced peak:  {_format_bytes(traced_peak - baseline_current)}")


if __name__ == "__main__":
    main()
