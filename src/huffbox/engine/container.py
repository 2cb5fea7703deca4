from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

from huffbox.core.code_table import BitCodeTable
from huffbox.core.codec_base import Encoder
from huffbox.core.codec_huffman import CodecHuffman
from huffbox.core.decode_engine import decode_payload
from huffbox.core.table_codec import byte_length, deserialize_table, serialize_table
from huffbox.errors import PayloadTooLarge, TruncatedHeader, TruncatedPayload

HEADER_SIZE = 4
MAX_BIT_LENGTH = 0xFFFFFFFF

# -------------------
# Container
# [BITLEN(u32 BE)|TABLE(sentinel-terminated)|PAYLOAD(ceil(BITLEN/8))]
# -------------------
def pack_container(bit_length: int, table: BitCodeTable, payload: bytes) -> bytes:
    if bit_length < 0 or bit_length > MAX_BIT_LENGTH:
        raise PayloadTooLarge(f"bit length {bit_length} does not fit in u32")
    need = byte_length(bit_length)
    if len(payload) < need:
        raise ValueError(f"payload too short: {len(payload)} byte(s) for {bit_length} bit(s)")

    out = bytearray()
    out += bit_length.to_bytes(HEADER_SIZE, "big")
    out += serialize_table(table)
    out += payload[:need]
    return bytes(out)


def read_header(blob: bytes) -> int:
    if len(blob) < HEADER_SIZE:
        raise TruncatedHeader(f"need {HEADER_SIZE} header bytes, got {len(blob)}")
    return int.from_bytes(blob[:HEADER_SIZE], "big")


def locate_payload(blob: bytes) -> Tuple[int, BitCodeTable, int]:
    """Parse header + table; returns (bit_length, table, payload offset)."""
    bit_length = read_header(blob)
    table, idx = deserialize_table(blob, HEADER_SIZE)
    return bit_length, table, idx


def unpack_container(blob: bytes) -> Tuple[int, BitCodeTable, bytes]:
    bit_length, table, idx = locate_payload(blob)

    need = byte_length(bit_length)
    if idx + need > len(blob):
        raise TruncatedPayload(
            f"payload truncated: {len(blob) - idx} byte(s) left, {need} needed for {bit_length} bit(s)"
        )
    payload = bytes(blob[idx:idx + need])
    return bit_length, table, payload


# -------------------
# API bytes -> bytes
# -------------------
def compress(data: bytes, encoder: Optional[Encoder] = None) -> bytes:
    if encoder is None:
        encoder = CodecHuffman()
    bit_length, table, payload = encoder.encode(bytes(data))
    return pack_container(bit_length, table, payload)


def decompress(blob: bytes) -> bytes:
    bit_length, table, payload = unpack_container(blob)
    return decode_payload(payload, bit_length, table)


# -------------------
# File helpers
# -------------------
def compress_file(input_path: str | Path, output_path: str | Path, encoder: Optional[Encoder] = None) -> int:
    """Compress a file; returns the container size in bytes."""
    data = Path(input_path).read_bytes()
    blob = compress(data, encoder=encoder)
    Path(output_path).write_bytes(blob)
    return len(blob)


def decompress_file(input_path: str | Path, output_path: str | Path) -> int:
    """Decompress a container file; returns the restored size in bytes."""
    blob = Path(input_path).read_bytes()
    data = decompress(blob)
    Path(output_path).write_bytes(data)
    return len(data)
