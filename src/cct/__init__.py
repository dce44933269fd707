"""CCT: Classic Codecs Toolkit (Huffman, RLE, LZ77 over text)."""

__version__ = "0.1.0"
