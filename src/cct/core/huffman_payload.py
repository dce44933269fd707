"""Packed Huffman payload (HUF1).

The bit-string produced by the Huffman codec is not self-describing: decoding
needs the code table. HUF1 carries both so a saved payload can be decoded
later without out-of-band state.

Layout:
  HUF1_MAGIC
  varint(n_entries)
  n_entries x [ varint(len(sym_utf8)) + sym_utf8 + varint(code_len) ]
  varint(n_payload_bits)
  bits: all table codes (entry order) followed by the payload bits,
        MSB-first, zero padded to a whole byte

The reported compression ratio does not use this size; it stays on the
JSON-table estimate computed at encode time.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Tuple

from cct.core.varint import dec_varint, enc_varint
from cct.errors import MalformedCompressedInput

HUF1_MAGIC = b"HUF1"


def is_packed_huffman(blob: bytes) -> bool:
    return len(blob) >= len(HUF1_MAGIC) and bytes(blob[: len(HUF1_MAGIC)]) == HUF1_MAGIC


def pack_bits(bits: str) -> bytes:
    out = bytearray()
    for i in range(0, len(bits), 8):
        chunk = bits[i : i + 8]
        out.append(int(chunk.ljust(8, "0"), 2))
    return bytes(out)


def unpack_bits(data: bytes, n_bits: int) -> str:
    if len(data) != (n_bits + 7) // 8:
        raise MalformedCompressedInput(
            f"HUF1: bit area is {len(data)} bytes, expected {(n_bits + 7) // 8}"
        )
    return "".join(f"{b:08b}" for b in data)[:n_bits]


def pack_huffman_payload(bits: str, codes: Mapping[str, str]) -> bytes:
    out = bytearray(HUF1_MAGIC)
    out += enc_varint(len(codes))
    table_bits: List[str] = []
    for sym, code in codes.items():
        sym_b = sym.encode("utf-8")
        out += enc_varint(len(sym_b))
        out += sym_b
        out += enc_varint(len(code))
        table_bits.append(code)
    out += enc_varint(len(bits))
    out += pack_bits("".join(table_bits) + bits)
    return bytes(out)


def unpack_huffman_payload(blob: bytes) -> Tuple[str, Dict[str, str]]:
    """Return (payload_bits, code_table)."""
    if not is_packed_huffman(blob):
        raise MalformedCompressedInput("HUF1: bad magic")
    idx = len(HUF1_MAGIC)
    try:
        n_entries, idx = dec_varint(blob, idx)
        entries: List[Tuple[str, int]] = []
        seen: set[str] = set()
        for _ in range(n_entries):
            sym_len, idx = dec_varint(blob, idx)
            if idx + sym_len > len(blob):
                raise MalformedCompressedInput("HUF1: truncated symbol")
            sym = blob[idx : idx + sym_len].decode("utf-8")
            if sym in seen:
                raise MalformedCompressedInput(f"HUF1: duplicate symbol {sym!r}")
            idx += sym_len
            code_len, idx = dec_varint(blob, idx)
            entries.append((sym, code_len))
            seen.add(sym)
        n_payload_bits, idx = dec_varint(blob, idx)
    except MalformedCompressedInput:
        raise
    except ValueError as e:
        # varint troncato / utf-8 non valido
        raise MalformedCompressedInput(f"HUF1: corrupt header: {e}") from e

    table_bits = sum(n for _, n in entries)
    all_bits = unpack_bits(blob[idx:], table_bits + n_payload_bits)

    codes: Dict[str, str] = {}
    pos = 0
    for sym, code_len in entries:
        codes[sym] = all_bits[pos : pos + code_len]
        pos += code_len
    return all_bits[pos:], codes
