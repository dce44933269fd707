from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, Optional, Union

Payload = Union[str, bytes]


@dataclass(frozen=True)
class CompressionResult:
    """
    One compression run, as handed to the UI.

    - compression_ratio: percentage, positive = shrink, negative = growth
    - processing_time: wall clock, milliseconds
    - code_table: Huffman only (needed to decode the bit-string payload)
    """

    original_size: int
    compressed_size: int
    compression_ratio: float
    processing_time: float
    algorithm: str
    compressed_payload: Payload
    original_payload: str
    code_table: Optional[Dict[str, str]] = None


def text_size(text: str) -> int:
    """Byte length of ``text`` under UTF-8."""
    return len(text.encode("utf-8"))


def compression_ratio(original_size: int, compressed_size: int) -> float:
    # empty input: nothing to shrink or grow
    if original_size <= 0:
        return 0.0
    return (original_size - compressed_size) / original_size * 100.0


class Stopwatch:
    """perf_counter based timer, reports milliseconds."""

    def __init__(self) -> None:
        self._t0 = time.perf_counter()

    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._t0) * 1000.0


def assemble_result(
    *,
    algorithm: str,
    original: str,
    compressed_payload: Payload,
    compressed_size: int,
    stopwatch: Stopwatch,
    code_table: Optional[Dict[str, str]] = None,
) -> CompressionResult:
    original_size = text_size(original)
    return CompressionResult(
        original_size=original_size,
        compressed_size=int(compressed_size),
        compression_ratio=compression_ratio(original_size, compressed_size),
        processing_time=stopwatch.elapsed_ms(),
        algorithm=algorithm,
        compressed_payload=compressed_payload,
        original_payload=original,
        code_table=dict(code_table) if code_table is not None else None,
    )
