from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from cct.core.codec_base import Codec
from cct.core.result import CompressionResult, Payload, Stopwatch, assemble_result, text_size
from cct.errors import MalformedCompressedInput
from cct.progress import ProgressCallback, emit

MAX_RUN = 255
ESCAPE = "\\"

_ASCII_ALNUM = re.compile(r"[a-zA-Z0-9]")


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_alnum(ch: str) -> bool:
    return _ASCII_ALNUM.fullmatch(ch) is not None


def iter_runs(text: str, max_run: int = MAX_RUN):
    """Yield (start, symbol, count) for each maximal run, split at max_run."""
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        count = 1
        while i + count < n and text[i + count] == ch and count < max_run:
            count += 1
        yield i, ch, count
        i += count


@dataclass(frozen=True)
class CodecRLE(Codec):
    """
    Text RLE with a length/class policy:
      - run > 3                         -> "<count><symbol>"
      - run 2..3 of a non [a-zA-Z0-9]   -> "<count><symbol>"
      - anything else                   -> symbols literally

    escape_digits=True: digits and '\\' from the input are always written as
    '\\' + symbol (also inside the run form, "12\\7"), so the decoder never
    mistakes an input digit for a count. With escape_digits=False the output
    is the plain format and inputs containing digits may not round-trip.
    """

    max_run: int = MAX_RUN
    escape_digits: bool = True

    algorithm_id = "rle"
    algorithm_name = "Run-Length Encoding"

    def __post_init__(self) -> None:
        # counts stay within one byte (fixed-width token)
        if not 1 <= int(self.max_run) <= MAX_RUN:
            raise ValueError(f"rle: max_run must be 1..{MAX_RUN}, got {self.max_run}")

    def _sym_out(self, ch: str) -> str:
        if self.escape_digits and (_is_digit(ch) or ch == ESCAPE):
            return ESCAPE + ch
        return ch

    def encode(self, text: str, on_progress: Optional[ProgressCallback] = None) -> str:
        out: List[str] = []
        n = len(text)
        for i, ch, count in iter_runs(text, self.max_run):
            emit(
                on_progress,
                "Compressing",
                20 + (i / n) * 60,
                f"Processing character {i + 1}/{n}...",
            )
            sym = self._sym_out(ch)
            if count > 3 or (count > 1 and not _is_alnum(ch)):
                out.append(f"{count}{sym}")
            else:
                out.append(sym * count)
        return "".join(out)

    def _read_symbol(self, s: str, j: int) -> Tuple[str, int]:
        ch = s[j]
        if self.escape_digits and ch == ESCAPE:
            if j + 1 >= len(s):
                raise MalformedCompressedInput(f"rle: dangling escape at position {j}")
            esc = s[j + 1]
            if not (_is_digit(esc) or esc == ESCAPE):
                raise MalformedCompressedInput(f"rle: invalid escape {esc!r} at position {j}")
            return esc, j + 2
        return ch, j + 1

    def decode(self, s: str) -> str:
        out: List[str] = []
        i = 0
        n = len(s)
        while i < n:
            if _is_digit(s[i]):
                j = i
                while j < n and _is_digit(s[j]):
                    j += 1
                count = int(s[i:j])
                if count <= 0:
                    raise MalformedCompressedInput(f"rle: invalid run count {s[i:j]!r} at {i}")
                if j >= n:
                    raise MalformedCompressedInput(
                        f"rle: run count {s[i:j]!r} at {i} has no symbol"
                    )
                sym, i = self._read_symbol(s, j)
                out.append(sym * count)
            else:
                sym, i = self._read_symbol(s, i)
                out.append(sym)
        return "".join(out)

    def compress(
        self, text: str, on_progress: Optional[ProgressCallback] = None
    ) -> CompressionResult:
        sw = Stopwatch()
        emit(on_progress, "Analyzing", 20, "Scanning for repetitions...")
        encoded = self.encode(text, on_progress)
        emit(on_progress, "Complete", 100, "RLE compression complete!")
        return assemble_result(
            algorithm=self.algorithm_name,
            original=text,
            compressed_payload=encoded,
            compressed_size=text_size(encoded),
            stopwatch=sw,
        )

    def decompress(self, payload: Payload) -> str:
        if isinstance(payload, (bytes, bytearray)):
            try:
                payload = bytes(payload).decode("utf-8")
            except UnicodeDecodeError as e:
                raise MalformedCompressedInput(f"rle: payload is not UTF-8: {e}") from e
        if not isinstance(payload, str):
            raise MalformedCompressedInput(f"rle: unsupported payload type {type(payload).__name__}")
        return self.decode(payload)
