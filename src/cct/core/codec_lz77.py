"""Simplified LZ77 (offset, length, next symbol) over text.

Match search is a plain scan of the whole window for every position:
O(n * window_size * look_ahead_size) in the worst case. That is fine for the
document sizes this toolkit targets and is the known scaling limit; a faster
match finder must produce exactly the same triples.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, List, NamedTuple, Optional, Sequence, Tuple

from cct.core.codec_base import Codec
from cct.core.result import CompressionResult, Payload, Stopwatch, assemble_result
from cct.errors import MalformedCompressedInput
from cct.progress import ProgressCallback, emit

WINDOW_SIZE = 4096
LOOK_AHEAD_SIZE = 18

# Estimated packed size of one triple (offset + length + symbol).
TRIPLE_COST = 6


class LZ77Triple(NamedTuple):
    offset: int
    length: int
    next_symbol: Optional[str]


def find_longest_match(
    data: str, i: int, window_size: int = WINDOW_SIZE, look_ahead_size: int = LOOK_AHEAD_SIZE
) -> Tuple[int, int]:
    """
    Return (offset, length) of the longest match for data[i:] in the window.

    Candidates are scanned from the most recent position backwards and only a
    strictly longer match replaces the current best, so ties keep the
    smallest offset. A match may run past i (self-overlap).
    """
    max_len = min(look_ahead_size, len(data) - i)
    best_off = 0
    best_len = 0
    start = max(0, i - window_size)

    for j in range(i - 1, start - 1, -1):
        k = 0
        while k < max_len and data[j + k] == data[i + k]:
            k += 1
        if k > best_len:
            best_len = k
            best_off = i - j
            if k == max_len:
                break

    return best_off, best_len


def replay_triples(triples: Sequence[LZ77Triple]) -> str:
    """Linear replay. Copies one symbol at a time so overlapping references work."""
    out: List[str] = []
    for t in triples:
        if t.length > 0:
            start = len(out) - t.offset
            for k in range(t.length):
                out.append(out[start + k])
        if t.next_symbol is not None:
            out.append(t.next_symbol)
    return "".join(out)


def triples_to_json(triples: Sequence[LZ77Triple]) -> str:
    rows = [{"offset": t.offset, "length": t.length, "next": t.next_symbol} for t in triples]
    return json.dumps(rows, ensure_ascii=False, separators=(",", ":"))


def _as_count(v: Any, key: str, idx: int) -> int:
    # bool is an int subclass, reject it explicitly
    if isinstance(v, bool) or not isinstance(v, int) or v < 0:
        raise MalformedCompressedInput(f"lz77: triple #{idx}: '{key}' must be an int >= 0")
    return v


def triples_from_json(payload: str) -> List[LZ77Triple]:
    """Parse and validate the JSON triple list (does not replay it)."""
    try:
        rows = json.loads(payload)
    except ValueError as e:
        raise MalformedCompressedInput(f"lz77: payload is not valid JSON: {e}") from e
    if not isinstance(rows, list):
        raise MalformedCompressedInput("lz77: payload must be a JSON array of triples")

    triples: List[LZ77Triple] = []
    produced = 0
    for idx, row in enumerate(rows):
        if not isinstance(row, dict) or set(row.keys()) != {"offset", "length", "next"}:
            raise MalformedCompressedInput(
                f"lz77: triple #{idx} must be an object with offset/length/next"
            )
        offset = _as_count(row["offset"], "offset", idx)
        length = _as_count(row["length"], "length", idx)
        nxt = row["next"]
        if nxt is not None and (not isinstance(nxt, str) or len(nxt) != 1):
            raise MalformedCompressedInput(f"lz77: triple #{idx}: 'next' must be one character or null")
        if length > 0 and not (1 <= offset <= produced):
            raise MalformedCompressedInput(
                f"lz77: triple #{idx}: offset {offset} outside the {produced} symbols decoded so far"
            )
        if length == 0 and nxt is None:
            raise MalformedCompressedInput(f"lz77: triple #{idx} is empty")

        triples.append(LZ77Triple(offset, length, nxt))
        produced += length + (0 if nxt is None else 1)
    return triples


@dataclass(frozen=True)
class CodecLZ77(Codec):
    window_size: int = WINDOW_SIZE
    look_ahead_size: int = LOOK_AHEAD_SIZE

    algorithm_id = "lz77"
    algorithm_name = "LZ77"

    def __post_init__(self) -> None:
        if int(self.window_size) < 1:
            raise ValueError(f"lz77: window_size must be >= 1, got {self.window_size}")
        if int(self.look_ahead_size) < 1:
            raise ValueError(f"lz77: look_ahead_size must be >= 1, got {self.look_ahead_size}")

    def encode(self, data: str, on_progress: Optional[ProgressCallback] = None) -> List[LZ77Triple]:
        triples: List[LZ77Triple] = []
        n = len(data)
        i = 0
        while i < n:
            emit(
                on_progress,
                "Compressing",
                10 + (i / n) * 80,
                f"Processing position {i + 1}/{n}...",
            )
            offset, length = find_longest_match(data, i, self.window_size, self.look_ahead_size)
            j = i + length
            nxt = data[j] if j < n else None
            triples.append(LZ77Triple(offset if length else 0, length, nxt))
            # the literal after the match is consumed too
            i = j + 1
        return triples

    def decode(self, triples: Sequence[LZ77Triple]) -> str:
        return replay_triples(triples)

    def compress(
        self, text: str, on_progress: Optional[ProgressCallback] = None
    ) -> CompressionResult:
        sw = Stopwatch()
        emit(on_progress, "Initializing", 10, "Setting up LZ77 compression...")
        triples = self.encode(text, on_progress)
        emit(on_progress, "Complete", 100, "LZ77 compression complete!")
        return assemble_result(
            algorithm=self.algorithm_name,
            original=text,
            compressed_payload=triples_to_json(triples),
            compressed_size=len(triples) * TRIPLE_COST,
            stopwatch=sw,
        )

    def decompress(self, payload: Payload) -> str:
        if isinstance(payload, (bytes, bytearray)):
            try:
                payload = bytes(payload).decode("utf-8")
            except UnicodeDecodeError as e:
                raise MalformedCompressedInput(f"lz77: payload is not UTF-8: {e}") from e
        if not isinstance(payload, str):
            raise MalformedCompressedInput(
                f"lz77: unsupported payload type {type(payload).__name__}"
            )
        return replay_triples(triples_from_json(payload))
