"""Algorithm dispatch for CCT.

This is the entrypoint a UI talks to:
  - encode(payload, algorithm, on_progress) -> CompressionResult
  - decode(compressed_payload, algorithm_name, code_table=...) -> str

The algorithm set is closed: huffman, rle, lz77. Adding one means adding a
descriptor to ALGORITHMS and a branch to get_codec().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Tuple, Union

from cct.codec_spec import CodecSpec
from cct.core.codec_huffman import CodecHuffman
from cct.core.codec_lz77 import CodecLZ77
from cct.core.codec_rle import CodecRLE
from cct.core.result import CompressionResult, Payload
from cct.errors import UnsupportedAlgorithm
from cct.progress import ProgressCallback

AnyCodec = Union[CodecHuffman, CodecRLE, CodecLZ77]


@dataclass(frozen=True)
class AlgorithmInfo:
    id: str
    name: str
    description: str
    complexity: str
    best_for: Tuple[str, ...]
    worst_for: Tuple[str, ...]


ALGORITHMS: Tuple[AlgorithmInfo, ...] = (
    AlgorithmInfo(
        "huffman",
        CodecHuffman.algorithm_name,
        "Variable-length codes by frequency: frequent characters get shorter codes.",
        "O(n log n)",
        ("Text files", "Source code", "Natural language"),
        ("Random data", "Already compressed files", "Binary data"),
    ),
    AlgorithmInfo(
        "rle",
        CodecRLE.algorithm_name,
        "Replaces consecutive identical characters with a count and the character.",
        "O(n)",
        ("Simple graphics", "Repetitive data"),
        ("Text with no repetition", "Random data"),
    ),
    AlgorithmInfo(
        "lz77",
        CodecLZ77.algorithm_name,
        "Replaces repeated substrings with references to previous occurrences.",
        "O(n^2)",
        ("General text", "Documents", "Mixed content"),
        ("Very short files", "Completely random data"),
    ),
)

# For convenience (fast lookup): tag and display name, case-insensitive
_ALGO_BY_KEY: dict[str, AlgorithmInfo] = {
    **{a.id: a for a in ALGORITHMS},
    **{a.name.lower(): a for a in ALGORITHMS},
}


def algorithm_info(algorithm: str) -> AlgorithmInfo:
    """Resolve a tag ("lz77") or display name ("LZ77") to its descriptor."""
    if not isinstance(algorithm, str):
        raise UnsupportedAlgorithm(algorithm)
    info = _ALGO_BY_KEY.get(algorithm.strip().lower())
    if info is None:
        raise UnsupportedAlgorithm(algorithm)
    return info


def get_codec(algorithm: str, spec: Optional[CodecSpec] = None) -> AnyCodec:
    s = spec if spec is not None else CodecSpec()
    algo_id = algorithm_info(algorithm).id
    if algo_id == "huffman":
        return s.huffman_codec()
    if algo_id == "rle":
        return s.rle_codec()
    if algo_id == "lz77":
        return s.lz77_codec()
    raise AssertionError("unreachable")


def encode(
    payload: str,
    algorithm: str,
    on_progress: Optional[ProgressCallback] = None,
    *,
    spec: Optional[CodecSpec] = None,
) -> CompressionResult:
    if not isinstance(payload, str):
        raise TypeError(f"payload must be str, got {type(payload).__name__}")
    codec = get_codec(algorithm, spec)
    return codec.compress(payload, on_progress)


def decode(
    compressed_payload: Payload,
    algorithm_name: str,
    *,
    code_table: Optional[Mapping[str, str]] = None,
    spec: Optional[CodecSpec] = None,
) -> str:
    """
    Reverse encode().

    Huffman needs either code_table (bit-string payload) or the packed HUF1
    bytes; otherwise HuffmanTableUnavailable is raised.
    """
    codec = get_codec(algorithm_name, spec)
    if isinstance(codec, CodecHuffman):
        return codec.decompress(compressed_payload, code_table=code_table)
    return codec.decompress(compressed_payload)


def decode_result(result: CompressionResult, *, spec: Optional[CodecSpec] = None) -> str:
    """Decode a CompressionResult produced by encode() (carries its own table)."""
    return decode(
        result.compressed_payload, result.algorithm, code_table=result.code_table, spec=spec
    )
