"""Typed errors for CCT.

Policy:
- Errors are small and boring.
- Codecs raise, they never truncate or guess on bad input.
- Callers (UI, scripts) decide how to present a failure; the core never retries.
"""

from __future__ import annotations


class CCTError(Exception):
    """Base error for CCT."""


class UnsupportedAlgorithm(CCTError, ValueError):
    """Unknown algorithm tag/name at encode or decode time."""

    def __init__(self, algorithm: object):
        self.algorithm = algorithm
        super().__init__(f"Unsupported algorithm: {algorithm!r}")


class MalformedCompressedInput(CCTError, ValueError):
    """A decoder could not match a code, a run or a triple."""


class HuffmanTableUnavailable(CCTError):
    """Huffman decode attempted without the code table."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "Huffman decompression requires the original code table "
            "(pass code_table=... or use the packed HUF1 payload)"
        )


class CodecSpecError(CCTError, ValueError):
    """Invalid codec configuration (JSON spec or env overrides)."""


class PayloadTooLarge(CCTError, ValueError):
    """Input file is larger than the accepted payload size."""

    def __init__(self, size: int, max_size: int):
        self.size = size
        self.max_size = max_size
        super().__init__(f"File size exceeds {max_size / (1024 * 1024):.1f}MB limit ({size} bytes)")
