from __future__ import annotations

import heapq
import itertools
import json
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

from cct.core.codec_base import Codec
from cct.core.frequency import FrequencyTable, build_freq_table
from cct.core.huffman_payload import is_packed_huffman, unpack_huffman_payload
from cct.core.result import CompressionResult, Payload, Stopwatch, assemble_result
from cct.errors import HuffmanTableUnavailable, MalformedCompressedInput
from cct.progress import ProgressCallback, emit

CodeTable = Dict[str, str]


# -------------------
# Huffman tree
# -------------------
@dataclass
class HuffmanNode:
    freq: int
    symbol: Optional[str] = None  # None on internal nodes
    left: Optional["HuffmanNode"] = None
    right: Optional["HuffmanNode"] = None

    @property
    def is_leaf(self) -> bool:
        return self.symbol is not None


def build_huffman_tree(freq: FrequencyTable) -> Optional[HuffmanNode]:
    """
    Merge the two lightest nodes until one is left.

    Ties break on insertion order: leaves are pushed in the table's iteration
    order (first occurrence), merged parents take the next counter value.
    """
    heap: List[Tuple[int, int, HuffmanNode]] = []
    counter = itertools.count()

    for sym, f in freq.items():
        if f <= 0:
            continue
        heapq.heappush(heap, (f, next(counter), HuffmanNode(freq=f, symbol=sym)))

    if not heap:
        return None

    # Caso speciale: un solo simbolo => la foglia e' la radice
    if len(heap) == 1:
        return heap[0][2]

    while len(heap) > 1:
        f1, _, n1 = heapq.heappop(heap)
        f2, _, n2 = heapq.heappop(heap)
        parent = HuffmanNode(freq=f1 + f2, left=n1, right=n2)
        heapq.heappush(heap, (parent.freq, next(counter), parent))

    return heap[0][2]


def build_code_table(root: Optional[HuffmanNode]) -> CodeTable:
    """Depth-first walk, '0' left / '1' right. Explicit stack, no recursion limit."""
    codes: CodeTable = {}
    if root is None:
        return codes

    stack: List[Tuple[HuffmanNode, str]] = [(root, "")]
    while stack:
        node, path = stack.pop()
        if node.is_leaf:
            # a lone root leaf still needs one bit to be decodable
            codes[node.symbol] = path or "0"  # type: ignore[index]
            continue
        # right first so that the left subtree is emitted first
        if node.right is not None:
            stack.append((node.right, path + "1"))
        if node.left is not None:
            stack.append((node.left, path + "0"))
    return codes


def code_table_size(codes: Mapping[str, str]) -> int:
    """
    Size of the table as it travels next to the payload: compact JSON,
    counted in UTF-16 code units (astral symbols count twice).
    """
    s = json.dumps(dict(codes), ensure_ascii=False, separators=(",", ":"))
    return len(s.encode("utf-16-le")) // 2


def encoded_size(bits: str, codes: Mapping[str, str]) -> int:
    return (len(bits) + 7) // 8 + code_table_size(codes)


def encode_symbols(text: str, codes: Mapping[str, str]) -> str:
    return "".join(codes[ch] for ch in text)


def validate_code_table(codes: Mapping[str, str]) -> None:
    """Raise MalformedCompressedInput unless ``codes`` is a usable prefix-free table."""
    seen: Dict[str, str] = {}
    for sym, code in codes.items():
        if not isinstance(sym, str) or len(sym) != 1:
            raise MalformedCompressedInput(f"huffman: invalid symbol in code table: {sym!r}")
        if not isinstance(code, str) or not code or code.strip("01"):
            raise MalformedCompressedInput(f"huffman: invalid code for {sym!r}: {code!r}")
        if code in seen:
            raise MalformedCompressedInput(
                f"huffman: code {code!r} shared by {seen[code]!r} and {sym!r}"
            )
        seen[code] = sym

    # In sorted order a prefix is always immediately followed by one of its extensions.
    ordered = sorted(seen)
    for a, b in zip(ordered, ordered[1:]):
        if b.startswith(a):
            raise MalformedCompressedInput(f"huffman: code {a!r} is a prefix of {b!r}")


def decode_bits(bits: str, codes: Mapping[str, str]) -> str:
    """
    Greedy prefix decode of a '0'/'1' string.

    Fails on foreign characters, on a prefix that cannot become a code and on
    a dangling suffix at the end of the stream.
    """
    if not bits:
        return ""
    validate_code_table(codes)
    if not codes:
        raise MalformedCompressedInput("huffman: empty code table for a non-empty bitstream")

    inverse = {code: sym for sym, code in codes.items()}
    max_len = max(len(c) for c in inverse)

    out: List[str] = []
    cur = ""
    for pos, bit in enumerate(bits):
        if bit != "0" and bit != "1":
            raise MalformedCompressedInput(f"huffman: non-binary character {bit!r} at bit {pos}")
        cur += bit
        sym = inverse.get(cur)
        if sym is not None:
            out.append(sym)
            cur = ""
        elif len(cur) >= max_len:
            raise MalformedCompressedInput(
                f"huffman: no code matches {cur!r} (ending at bit {pos})"
            )

    if cur:
        raise MalformedCompressedInput(f"huffman: trailing bits {cur!r} do not form a code")
    return "".join(out)


class CodecHuffman(Codec):
    algorithm_id = "huffman"
    algorithm_name = "Huffman Coding"

    def compress(
        self, text: str, on_progress: Optional[ProgressCallback] = None
    ) -> CompressionResult:
        sw = Stopwatch()

        emit(on_progress, "Analyzing", 10, "Building frequency table...")
        freq = build_freq_table(text)

        emit(on_progress, "Building Tree", 30, "Constructing Huffman tree...")
        root = build_huffman_tree(freq)

        emit(on_progress, "Generating Codes", 50, "Creating character codes...")
        codes = build_code_table(root)

        emit(on_progress, "Compressing", 70, "Encoding data...")
        bits = encode_symbols(text, codes)

        emit(on_progress, "Complete", 100, "Compression complete!")
        return assemble_result(
            algorithm=self.algorithm_name,
            original=text,
            compressed_payload=bits,
            compressed_size=encoded_size(bits, codes),
            stopwatch=sw,
            code_table=codes,
        )

    def decompress(self, payload: Payload, code_table: Optional[Mapping[str, str]] = None) -> str:
        """
        payload:
          - bit-string ('0'/'1') -> requires code_table
          - packed HUF1 bytes   -> self-describing, code_table ignored
        """
        if isinstance(payload, (bytes, bytearray)):
            if not is_packed_huffman(payload):
                raise MalformedCompressedInput("huffman: bytes payload is not a HUF1 blob")
            bits, table = unpack_huffman_payload(bytes(payload))
            return decode_bits(bits, table)

        if not isinstance(payload, str):
            raise MalformedCompressedInput(
                f"huffman: unsupported payload type {type(payload).__name__}"
            )
        if not payload:
            return ""
        if code_table is None:
            raise HuffmanTableUnavailable()
        return decode_bits(payload, code_table)
