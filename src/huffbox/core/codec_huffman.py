from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

import heapq
import itertools

from bitarray import bitarray

from .code_table import ENDIAN, BitCodeTable
from .codec_base import Encoder

# -------------------
# Strutture di base Huffman
# -------------------
@dataclass
class HuffmanNode:
    freq: int
    symbol: Optional[int] = None  # 0-255 per foglie, None per interni
    left: Optional["HuffmanNode"] = None
    right: Optional["HuffmanNode"] = None

def build_freq_table(data: bytes) -> List[int]:
    freq = [0] * 256
    for b in data:
        freq[b] += 1
    return freq

def build_huffman_tree(freq: List[int]) -> Optional[HuffmanNode]:
    heap: List[tuple[int, int, HuffmanNode]] = []
    counter = itertools.count()

    for sym, f in enumerate(freq):
        if f > 0:
            node = HuffmanNode(freq=f, symbol=sym)
            heapq.heappush(heap, (f, next(counter), node))

    if not heap:
        return None

    # Caso speciale: un solo simbolo => aggiungo dummy (codici da 1 bit)
    if len(heap) == 1:
        f, _, only = heap[0]
        dummy_symbol = (only.symbol + 1) % len(freq)
        dummy = HuffmanNode(freq=0, symbol=dummy_symbol)
        heapq.heappush(heap, (0, next(counter), dummy))

    while len(heap) > 1:
        f1, _, n1 = heapq.heappop(heap)
        f2, _, n2 = heapq.heappop(heap)
        parent = HuffmanNode(freq=f1 + f2, symbol=None, left=n1, right=n2)
        heapq.heappush(heap, (parent.freq, next(counter), parent))

    return heap[0][2]

def build_code_map(root: HuffmanNode) -> Dict[int, str]:
    codes: Dict[int, str] = {}

    # Iterativo: alberi molto sbilanciati possono superare la profondità di ricorsione
    stack: List[tuple[HuffmanNode, str]] = [(root, "")]
    while stack:
        node, path = stack.pop()
        if node.symbol is not None and node.left is None and node.right is None:
            codes[node.symbol] = path or "0"
            continue
        if node.right is not None:
            stack.append((node.right, path + "1"))
        if node.left is not None:
            stack.append((node.left, path + "0"))

    return codes

def build_code_table(freq: List[int]) -> BitCodeTable:
    """
    freq -> BitCodeTable (entries in ascending symbol order).

    No symbol at all (empty input): the container still needs one entry,
    so we emit the placeholder {0: "0"}.
    """
    root = build_huffman_tree(freq)
    if root is None:
        return BitCodeTable.from_mapping({0: "0"})
    codes = build_code_map(root)
    return BitCodeTable.from_mapping({sym: codes[sym] for sym in sorted(codes)})

def encode_data(data: bytes, table: BitCodeTable) -> tuple[int, bytes]:
    """
    data -> (bit_length, payload)
    payload is MSB-first, last byte zero padded.
    """
    bits = bitarray(endian=ENDIAN)
    if data:
        bits.encode(table.encoding_map(), data)
    return len(bits), bits.tobytes()

class CodecHuffman(Encoder):
    codec_id = "huffman"

    def encode(self, data: bytes) -> tuple[int, BitCodeTable, bytes]:
        data = bytes(data)
        table = build_code_table(build_freq_table(data))
        bit_length, payload = encode_data(data, table)
        return bit_length, table, payload
