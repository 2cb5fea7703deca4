"""Greedy prefix-code decoder, as an explicit two-state automaton.

States:
  ACCUMULATING  the accumulator holds a (possibly empty) prefix of some code
  MATCHED       the last fed bit completed a code; its symbol was emitted and
                the accumulator was reset

Every ``feed`` goes back through ACCUMULATING; the state after a feed tells
whether that bit closed a code. Termination is driven by the declared bit
length, never by the payload size: padding bits in the final byte are not fed.
"""

from __future__ import annotations

from enum import Enum

from bitarray import bitarray

from huffbox.core.code_table import ENDIAN, BitCodeTable
from huffbox.core.table_codec import byte_length
from huffbox.errors import InvalidCode, TruncatedPayload, UnmatchedTrailingBits


class DecodeState(Enum):
    ACCUMULATING = "accumulating"
    MATCHED = "matched"


class DecodeEngine:
    def __init__(self, table: BitCodeTable) -> None:
        self.table = table
        self.state = DecodeState.ACCUMULATING
        self.acc = bitarray(endian=ENDIAN)
        self.cursor = 0
        self._max_len = table.max_code_length

    def feed(self, bit: int) -> int | None:
        """Consume one bit. Returns the emitted symbol, or None if still accumulating."""
        self.state = DecodeState.ACCUMULATING
        self.acc.append(bit)
        self.cursor += 1

        sym = self.table.lookup(self.acc)
        if sym is not None:
            self.state = DecodeState.MATCHED
            self.acc = bitarray(endian=ENDIAN)
            return sym

        if len(self.acc) >= self._max_len:
            raise InvalidCode(
                f"no code matches {self.acc.to01()} at bit {self.cursor - len(self.acc)}"
            )
        return None

    def finish(self) -> None:
        if len(self.acc):
            raise UnmatchedTrailingBits(
                f"{len(self.acc)} trailing bit(s) {self.acc.to01()} match no code"
            )

    def run(self, payload: bytes, bit_length: int) -> bytes:
        if len(payload) < byte_length(bit_length):
            raise TruncatedPayload(
                f"payload has {len(payload)} byte(s), {byte_length(bit_length)} needed "
                f"for {bit_length} bit(s)"
            )

        bits = bitarray(endian=ENDIAN)
        bits.frombytes(bytes(payload[:byte_length(bit_length)]))

        out = bytearray()
        for bit in bits[:bit_length]:
            sym = self.feed(bit)
            if sym is not None:
                out.append(sym)
        self.finish()
        return bytes(out)


def decode_payload(payload: bytes, bit_length: int, table: BitCodeTable) -> bytes:
    """payload + exact bit length + table -> original bytes."""
    return DecodeEngine(table).run(payload, bit_length)
