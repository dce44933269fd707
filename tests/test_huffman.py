from __future__ import annotations

import pytest

from cct.core.codec_huffman import (
    CodecHuffman,
    build_code_table,
    build_huffman_tree,
    code_table_size,
    decode_bits,
    encode_symbols,
    validate_code_table,
)
from cct.core.frequency import build_freq_table
from cct.errors import HuffmanTableUnavailable, MalformedCompressedInput
from cct.progress import ProgressRecorder

SAMPLES = [
    "a",
    "ab",
    "aaabbc",
    "hello world",
    "the quick brown fox jumps over the lazy dog " * 5,
    "ciao Ω λ ✓ 日本語 😀",
    "\n\t  \r\n",
]


def _assert_prefix_free(codes: dict[str, str]) -> None:
    items = list(codes.items())
    for i, (a, ca) in enumerate(items):
        for b, cb in items[i + 1 :]:
            assert not ca.startswith(cb), f"{a!r}:{ca} starts with {b!r}:{cb}"
            assert not cb.startswith(ca), f"{b!r}:{cb} starts with {a!r}:{ca}"


def test_freq_table_counts_in_first_occurrence_order() -> None:
    freq = build_freq_table("abracadabra")
    assert dict(freq) == {"a": 5, "b": 2, "r": 2, "c": 1, "d": 1}
    assert list(freq) == ["a", "b", "r", "c", "d"]
    with pytest.raises(TypeError):
        freq["z"] = 1  # type: ignore[index]


def test_freq_table_empty() -> None:
    assert dict(build_freq_table("")) == {}


def test_tree_none_for_empty_input() -> None:
    assert build_huffman_tree(build_freq_table("")) is None
    assert build_code_table(None) == {}


def test_single_symbol_gets_one_bit_code() -> None:
    root = build_huffman_tree(build_freq_table("zzzz"))
    assert root is not None and root.is_leaf
    codes = build_code_table(root)
    assert codes == {"z": "0"}
    bits = encode_symbols("zzzz", codes)
    assert bits == "0000"
    assert decode_bits(bits, codes) == "zzzz"


def test_codes_vector_aaabbc() -> None:
    # c(1)+b(2) merge first, then a(3) vs parent(3): a was inserted first -> left
    codes = build_code_table(build_huffman_tree(build_freq_table("aaabbc")))
    assert codes == {"a": "0", "c": "10", "b": "11"}
    assert list(codes) == ["a", "c", "b"]
    assert encode_symbols("aaabbc", codes) == "000111110"


def test_root_weight_is_input_length() -> None:
    text = "mississippi river"
    root = build_huffman_tree(build_freq_table(text))
    assert root is not None
    assert root.freq == len(text)


@pytest.mark.parametrize("text", SAMPLES)
def test_codes_are_prefix_free_and_roundtrip(text: str) -> None:
    codes = build_code_table(build_huffman_tree(build_freq_table(text)))
    assert set(codes) == set(text)
    assert all(codes.values())
    _assert_prefix_free(codes)
    validate_code_table(codes)
    assert decode_bits(encode_symbols(text, codes), codes) == text


def test_frequent_symbols_never_get_longer_codes() -> None:
    text = "e" * 50 + "t" * 20 + "a" * 10 + "q"
    codes = build_code_table(build_huffman_tree(build_freq_table(text)))
    assert len(codes["e"]) <= len(codes["t"]) <= len(codes["a"]) <= len(codes["q"])


def test_compress_result_sizes_aaabbc() -> None:
    r = CodecHuffman().compress("aaabbc")
    assert r.algorithm == "Huffman Coding"
    assert r.compressed_payload == "000111110"
    assert r.code_table == {"a": "0", "c": "10", "b": "11"}
    # 9 bits -> 2 bytes, table '{"a":"0","c":"10","b":"11"}' -> 27
    assert code_table_size(r.code_table) == 27
    assert r.original_size == 6
    assert r.compressed_size == 29
    assert r.compression_ratio == pytest.approx((6 - 29) / 6 * 100)
    assert r.processing_time >= 0.0


def test_code_table_size_counts_utf16_units() -> None:
    # '{"Ω":"0"}' is 9 units; an astral symbol takes a surrogate pair
    assert code_table_size({"Ω": "0"}) == 9
    assert code_table_size({"😀": "0"}) == 10
    assert code_table_size({"😀": "0", "a": "1"}) == 18


def test_compress_large_repetitive_input_shrinks() -> None:
    text = ("aaaaaaab" * 500) + "c"
    r = CodecHuffman().compress(text)
    assert r.compression_ratio > 0
    assert CodecHuffman().decompress(r.compressed_payload, code_table=r.code_table) == text


def test_compress_empty() -> None:
    r = CodecHuffman().compress("")
    assert r.original_size == 0
    assert r.compressed_payload == ""
    assert r.code_table == {}
    assert r.compression_ratio == 0.0
    assert CodecHuffman().decompress("", code_table=r.code_table) == ""
    assert CodecHuffman().decompress("") == ""


def test_progress_milestones() -> None:
    rec = ProgressRecorder()
    CodecHuffman().compress("hello", rec)
    assert rec.stages == ["Analyzing", "Building Tree", "Generating Codes", "Compressing", "Complete"]
    assert rec.percentages == [10, 30, 50, 70, 100]
    assert rec.last().message == "Compression complete!"  # type: ignore[union-attr]


def test_decompress_without_table_fails() -> None:
    r = CodecHuffman().compress("hello")
    with pytest.raises(HuffmanTableUnavailable):
        CodecHuffman().decompress(r.compressed_payload)


def test_decode_rejects_malformed_bitstreams() -> None:
    codes = {"a": "0", "c": "10", "b": "11"}

    with pytest.raises(MalformedCompressedInput, match="trailing"):
        decode_bits("0001", codes)
    with pytest.raises(MalformedCompressedInput, match="non-binary"):
        decode_bits("0x1", codes)

    # incomplete table: '11' is not assigned
    with pytest.raises(MalformedCompressedInput, match="no code"):
        decode_bits("0110", {"a": "0", "c": "10"})


def test_validate_code_table_rejects_bad_tables() -> None:
    with pytest.raises(MalformedCompressedInput, match="prefix"):
        validate_code_table({"a": "0", "b": "01"})
    with pytest.raises(MalformedCompressedInput, match="shared"):
        validate_code_table({"a": "10", "b": "10"})
    with pytest.raises(MalformedCompressedInput):
        validate_code_table({"a": ""})
    with pytest.raises(MalformedCompressedInput):
        validate_code_table({"a": "012"})
    with pytest.raises(MalformedCompressedInput, match="symbol"):
        validate_code_table({"ab": "0"})


def test_decode_with_empty_table_fails() -> None:
    with pytest.raises(MalformedCompressedInput):
        decode_bits("0", {})
