from __future__ import annotations

from typing import Tuple


def enc_varint(x: int) -> bytes:
    if x < 0:
        raise ValueError("negative varint not supported")
    out = bytearray()
    while True:
        b = x & 0x7F
        x >>= 7
        if x:
            out.append(0x80 | b)
        else:
            out.append(b)
            break
    return bytes(out)


def dec_varint(buf: bytes, idx: int) -> Tuple[int, int]:
    """Return (value, next_idx). Raises ValueError on truncated/oversized input."""
    shift = 0
    x = 0
    while True:
        if idx >= len(buf):
            raise ValueError("truncated varint")
        b = buf[idx]
        idx += 1
        x |= (b & 0x7F) << shift
        if (b & 0x80) == 0:
            break
        shift += 7
        if shift > 63:
            raise ValueError("varint too large")
    return x, idx
