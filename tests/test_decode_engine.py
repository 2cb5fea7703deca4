from __future__ import annotations

import random

import pytest
from bitarray import bitarray

from huffbox.core.code_table import BitCodeTable
from huffbox.core.codec_huffman import CodecHuffman
from huffbox.core.decode_engine import DecodeEngine, DecodeState, decode_payload
from huffbox.errors import DecodeError, InvalidCode, TruncatedPayload, UnmatchedTrailingBits


def _abc() -> BitCodeTable:
    return BitCodeTable.from_mapping({0x41: "0", 0x42: "10", 0x43: "11"})


def test_state_transitions() -> None:
    eng = DecodeEngine(_abc())
    assert eng.state is DecodeState.ACCUMULATING

    assert eng.feed(1) is None
    assert eng.state is DecodeState.ACCUMULATING
    assert eng.acc.to01() == "1"

    assert eng.feed(0) == 0x42
    assert eng.state is DecodeState.MATCHED
    assert len(eng.acc) == 0

    assert eng.feed(0) == 0x41
    assert eng.state is DecodeState.MATCHED
    assert eng.cursor == 3
    eng.finish()


def test_decode_abac() -> None:
    # A=0 B=10 A=0 C=11 -> 010011 (6 bits) -> 0x4c
    assert decode_payload(b"\x4c", 6, _abc()) == b"ABAC"


def test_padding_bits_are_not_decoded() -> None:
    # 0x4f = 01001111: bits 7..8 would decode an extra C if fed
    assert decode_payload(b"\x4f", 6, _abc()) == b"ABAC"


def test_zero_bits_decodes_to_empty() -> None:
    assert decode_payload(b"", 0, _abc()) == b""


def test_cursor_stops_exactly_at_bit_length() -> None:
    eng = DecodeEngine(_abc())
    eng.run(b"\x4c\xff\xff", 6)
    assert eng.cursor == 6


def test_unmatched_trailing_bits() -> None:
    # single "1" bit: prefix of B and C, but the stream ends there
    with pytest.raises(UnmatchedTrailingBits, match="trailing"):
        decode_payload(b"\x80", 1, _abc())


def test_invalid_code_fails_early() -> None:
    t = BitCodeTable.from_mapping({0: "00", 1: "01"})
    eng = DecodeEngine(t)
    with pytest.raises(InvalidCode):
        eng.run(b"\xc0\x00\x00", 24)
    assert eng.cursor == 2


def test_decode_errors_share_a_base() -> None:
    assert issubclass(UnmatchedTrailingBits, DecodeError)
    assert issubclass(InvalidCode, DecodeError)


def test_short_payload_is_truncated() -> None:
    with pytest.raises(TruncatedPayload):
        decode_payload(b"\x4c", 9, _abc())


def test_at_most_one_code_is_a_prefix_of_the_accumulator() -> None:
    rng = random.Random(1234)
    data = bytes(rng.choice(b"aaaaabbbccdefgh\x00\xff") for _ in range(2000))
    bit_length, table, payload = CodecHuffman().encode(data)
    codes = [c.to01() for c in table.codes]

    bits = bitarray(endian="big")
    bits.frombytes(payload)

    eng = DecodeEngine(table)
    acc = ""
    for bit in bits[:bit_length]:
        acc += str(bit)
        hits = [c for c in codes if acc.startswith(c)]
        assert len(hits) <= 1
        sym = eng.feed(bit)
        if hits:
            assert hits[0] == acc
            assert sym == table.translate(bitarray(acc))
            acc = ""
        else:
            assert sym is None
    eng.finish()
    assert eng.cursor == bit_length
