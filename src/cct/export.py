"""Payload I/O around the codecs (what the UI used to do with blobs/downloads).

Determinism note:
result_summary() is meant to be diffable, except for processing_time_ms which
is wall clock. Nothing else run/environment-specific goes in there.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from cct.core.huffman_payload import pack_huffman_payload
from cct.core.result import CompressionResult, Payload
from cct.engine import algorithm_info
from cct.errors import HuffmanTableUnavailable, PayloadTooLarge

MAX_PAYLOAD_SIZE = 10 * 1024 * 1024


def read_text_payload(path: str | Path, max_size: int | None = MAX_PAYLOAD_SIZE) -> str:
    """
    Read a file as text. Invalid UTF-8 bytes become U+FFFD (like readAsText).

    Files above max_size bytes are refused before reading (None: no limit).
    """
    p = Path(path)
    if max_size is not None:
        size = p.stat().st_size
        if size > max_size:
            raise PayloadTooLarge(size, max_size)
    return p.read_bytes().decode("utf-8", errors="replace")


def _base_name(name: str) -> str:
    # text before the first dot; dotfiles (".env") keep their whole name
    base = Path(name).name
    return base.split(".")[0] or base


def compressed_filename(name: str) -> str:
    return f"{_base_name(name)}_compressed.dat"


def decompressed_filename(name: str) -> str:
    return f"{_base_name(name)}_decompressed.txt"


def compressed_bytes(result: CompressionResult) -> bytes:
    """
    Bytes written by save_compressed().

    Huffman results are packed as HUF1 (table + bits) so the file decodes on
    its own; the other algorithms write their text payload as UTF-8.
    """
    payload = result.compressed_payload
    if algorithm_info(result.algorithm).id == "huffman":
        if isinstance(payload, (bytes, bytearray)):
            return bytes(payload)
        if result.code_table is None:
            raise HuffmanTableUnavailable("cannot save a Huffman result without its code table")
        return pack_huffman_payload(payload, result.code_table)
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload)
    return payload.encode("utf-8")


def save_compressed(result: CompressionResult, path: str | Path) -> Path:
    p = Path(path)
    p.write_bytes(compressed_bytes(result))
    return p


def load_compressed(path: str | Path, algorithm: str) -> Payload:
    """Read a file written by save_compressed() in the form decode() expects."""
    raw = Path(path).read_bytes()
    if algorithm_info(algorithm).id == "huffman":
        return raw
    return raw.decode("utf-8")


def _bytes_h(n: int) -> str:
    if n < 0:
        return "-" + _bytes_h(-n)
    units = ["B", "KiB", "MiB", "GiB"]
    f = float(n)
    u = 0
    while f >= 1024.0 and u < len(units) - 1:
        f /= 1024.0
        u += 1
    return f"{int(f)} {units[u]}" if u == 0 else f"{f:.2f} {units[u]}"


def _time_h(ms: float) -> str:
    if ms < 1000:
        return f"{ms:.1f}ms"
    return f"{ms / 1000:.2f}s"


def result_summary(result: CompressionResult) -> dict[str, Any]:
    """JSON-ready view of a result (no payloads)."""
    ratio = float(result.compression_ratio)
    out: dict[str, Any] = {
        "algorithm": result.algorithm,
        "algorithm_id": algorithm_info(result.algorithm).id,
        "original_size": int(result.original_size),
        "compressed_size": int(result.compressed_size),
        "original_size_h": _bytes_h(result.original_size),
        "compressed_size_h": _bytes_h(result.compressed_size),
        "saved_bytes": int(result.original_size - result.compressed_size),
        "compression_ratio": round(ratio, 2),
        "outcome": "compressed" if ratio >= 0 else "expanded",
        "processing_time_ms": round(float(result.processing_time), 3),
        "processing_time_h": _time_h(float(result.processing_time)),
    }
    if result.code_table is not None:
        out["code_table_symbols"] = len(result.code_table)
    return out
