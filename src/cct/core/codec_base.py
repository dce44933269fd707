from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from cct.core.result import CompressionResult, Payload
from cct.progress import ProgressCallback


class Codec(ABC):
    """
    Minimal interface shared by the three text codecs.

    NOTE: the set of implementations is closed (huffman, rle, lz77); the
    dispatcher in cct.engine maps tags to these classes explicitly.
      - algorithm_id: short tag used by callers ("rle")
      - algorithm_name: display name stored in CompressionResult.algorithm
    """

    algorithm_id: str
    algorithm_name: str

    @abstractmethod
    def compress(
        self, text: str, on_progress: Optional[ProgressCallback] = None
    ) -> CompressionResult:
        raise NotImplementedError

    @abstractmethod
    def decompress(self, payload: Payload) -> str:
        raise NotImplementedError
