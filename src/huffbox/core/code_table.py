from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field

from bitarray import bitarray, frozenbitarray

# -------------------
# Tabella simbolo -> codice (prefix-free)
# -------------------

ENDIAN = "big"  # MSB-first ovunque: codici, payload, tabella serializzata


def to_code(bits: bitarray | str | Iterable[int]) -> frozenbitarray:
    """Normalize anything bit-like ("0101", [0, 1], bitarray) to a frozen MSB-first code."""
    if isinstance(bits, bitarray):
        return frozenbitarray(bits.to01(), endian=ENDIAN)
    if isinstance(bits, str):
        return frozenbitarray(bits, endian=ENDIAN)
    return frozenbitarray(list(bits), endian=ENDIAN)


@dataclass(frozen=True, slots=True)
class BitCodeTable:
    """
    Ordered, immutable mapping byte symbol (0..255) -> bit code.

    Order matters only for serialization (entries are written as given).
    Equivalence between tables is order-independent: compare ``as_dict()``.

    Prefix-freeness is a precondition owned by whoever built the codes;
    it is *not* checked here (see ``is_prefix_free`` for diagnostics).
    """

    entries: tuple[tuple[int, frozenbitarray], ...]
    _by_code: dict[frozenbitarray, int] = field(init=False, repr=False, compare=False)
    _by_symbol: dict[int, frozenbitarray] = field(init=False, repr=False, compare=False)
    _max_len: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        norm: list[tuple[int, frozenbitarray]] = []
        by_code: dict[frozenbitarray, int] = {}
        by_symbol: dict[int, frozenbitarray] = {}

        for sym, code in self.entries:
            sym = int(sym)
            if sym < 0 or sym > 0xFF:
                raise ValueError(f"symbol out of byte range: {sym}")
            code = to_code(code)
            if len(code) == 0:
                raise ValueError(f"empty code for symbol {sym}")
            if sym in by_symbol:
                raise ValueError(f"duplicate symbol: {sym}")
            if code in by_code:
                raise ValueError(f"duplicate code {code.to01()} (symbols {by_code[code]} and {sym})")
            by_symbol[sym] = code
            by_code[code] = sym
            norm.append((sym, code))

        object.__setattr__(self, "entries", tuple(norm))
        object.__setattr__(self, "_by_code", by_code)
        object.__setattr__(self, "_by_symbol", by_symbol)
        object.__setattr__(self, "_max_len", max((len(c) for c in by_code), default=0))

    @classmethod
    def from_mapping(cls, mapping: Mapping[int, bitarray | str | Iterable[int]]) -> "BitCodeTable":
        """Build a table from ``{symbol: code}``, keeping the mapping's iteration order."""
        return cls(tuple((sym, to_code(code)) for sym, code in mapping.items()))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[tuple[int, frozenbitarray]]:
        return iter(self.entries)

    @property
    def symbols(self) -> list[int]:
        return [sym for sym, _ in self.entries]

    @property
    def codes(self) -> list[frozenbitarray]:
        return [code for _, code in self.entries]

    @property
    def max_code_length(self) -> int:
        return self._max_len

    def has_code(self, bits: bitarray) -> bool:
        return to_code(bits) in self._by_code

    def translate(self, bits: bitarray) -> int:
        """Reverse lookup: code -> symbol. KeyError if ``bits`` is not a code."""
        return self._by_code[to_code(bits)]

    def lookup(self, bits: bitarray) -> int | None:
        """Like ``translate`` but returns None for a non-code (single dict probe)."""
        return self._by_code.get(to_code(bits))

    def code_for(self, symbol: int) -> frozenbitarray:
        return self._by_symbol[int(symbol)]

    def as_dict(self) -> dict[int, str]:
        return {sym: code.to01() for sym, code in self.entries}

    def encoding_map(self) -> dict[int, bitarray]:
        """Map in the shape ``bitarray.encode`` expects."""
        return {sym: bitarray(code) for sym, code in self.entries}

    def is_prefix_free(self) -> bool:
        # Diagnostics only; the decoder assumes this already holds.
        ordered = sorted(c.to01() for c in self._by_code)
        for a, b in zip(ordered, ordered[1:]):
            if b.startswith(a):
                return False
        return True
