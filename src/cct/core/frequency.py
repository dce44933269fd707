from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from types import MappingProxyType

FrequencyTable = Mapping[str, int]


def build_freq_table(symbols: Iterable[str]) -> FrequencyTable:
    """
    Count symbol occurrences in one pass.

    The returned mapping is read-only and iterates in first-occurrence order,
    which is what the Huffman tie-break relies on.
    """
    return MappingProxyType(dict(Counter(symbols)))
