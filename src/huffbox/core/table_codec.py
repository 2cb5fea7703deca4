"""Code table wire format.

Layout, repeated once per entry (no entry count, no total length):

    symbol(u8) | code_len_bits(u8) | code_bits[ceil(len/8)] | marker(u8)

``code_bits`` are MSB-first with the unused low bits of the last byte zeroed.
``marker`` is 0x00 when another entry follows, 0xFF on the last entry: the
reader stops on the sentinel alone.
"""

from __future__ import annotations

from bitarray import bitarray, frozenbitarray

from huffbox.core.code_table import ENDIAN, BitCodeTable
from huffbox.errors import BadTableEntry, CodeTooLong, EmptyTable, TruncatedTable

MARKER_MORE = 0x00
MARKER_LAST = 0xFF
MAX_CODE_BITS = 0xFF


def byte_length(bit_length: int) -> int:
    return (bit_length + 7) // 8


def serialize_table(table: BitCodeTable) -> bytes:
    if len(table) == 0:
        raise EmptyTable("code table has no entries")

    out = bytearray()
    last = len(table) - 1
    for i, (sym, code) in enumerate(table):
        if len(code) > MAX_CODE_BITS:
            raise CodeTooLong(
                f"code for symbol {sym} is {len(code)} bits (max {MAX_CODE_BITS})"
            )
        out.append(sym)
        out.append(len(code))
        out += code.tobytes()  # zero padded by bitarray
        out.append(MARKER_LAST if i == last else MARKER_MORE)
    return bytes(out)


def deserialize_table(blob: bytes, idx: int = 0) -> tuple[BitCodeTable, int]:
    """
    Read entries starting at ``blob[idx]`` until the 0xFF sentinel.

    Returns (table, idx of the first byte after the sentinel).
    """
    entries: list[tuple[int, frozenbitarray]] = []
    seen: set[int] = set()
    n = len(blob)

    while True:
        if idx + 2 > n:
            raise TruncatedTable(f"table truncated (entry {len(entries)} header)")
        sym = blob[idx]
        code_len = blob[idx + 1]
        idx += 2

        if code_len == 0:
            raise BadTableEntry(f"zero-length code for symbol {sym}")
        if sym in seen:
            raise BadTableEntry(f"duplicate symbol {sym} in table")

        nbytes = byte_length(code_len)
        if idx + nbytes > n:
            raise TruncatedTable(f"table truncated (code bits for symbol {sym})")
        bits = bitarray(endian=ENDIAN)
        bits.frombytes(bytes(blob[idx:idx + nbytes]))
        idx += nbytes
        del bits[code_len:]  # padding

        if idx >= n:
            raise TruncatedTable(f"table truncated (marker after symbol {sym})")
        marker = blob[idx]
        idx += 1

        entries.append((sym, frozenbitarray(bits)))
        seen.add(sym)

        if marker == MARKER_LAST:
            break
        if marker != MARKER_MORE:
            raise BadTableEntry(f"unexpected continuation marker 0x{marker:02x}")

    try:
        table = BitCodeTable(tuple(entries))
    except ValueError as e:
        raise BadTableEntry(str(e)) from e
    return table, idx
