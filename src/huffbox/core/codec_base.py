from __future__ import annotations

from abc import ABC, abstractmethod

from .code_table import BitCodeTable


class Encoder(ABC):
    """
    Minimal interface for pluggable prefix-code encoders.

    The container core only needs the triplet below; how codes are chosen
    (frequency model, tree shape, canonical form...) is entirely up to the
    implementation.

    Contract on the returned table:
      - codes are prefix-free (not re-checked by the decoder)
      - every byte of ``data`` has a code
      - at least one entry, even for empty ``data``
    """

    codec_id: str

    @abstractmethod
    def encode(self, data: bytes) -> tuple[int, BitCodeTable, bytes]:
        """Return (bit_length, table, payload)."""
        raise NotImplementedError
