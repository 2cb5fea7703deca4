"""Container verification.

Policy: light by default (header + table + payload bounds), --full also runs
the decoder and checks the bitstream ends exactly on a code boundary.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from huffbox.core.decode_engine import decode_payload
from huffbox.core.table_codec import byte_length
from huffbox.engine.container import HEADER_SIZE, locate_payload, unpack_container


@dataclass(frozen=True)
class ContainerInfo:
    bit_length: int
    entries: int
    table_size: int
    payload_size: int
    trailing_bytes: int
    max_code_length: int
    decoded_size: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def verify_container(blob: bytes, *, full: bool = False) -> ContainerInfo:
    """Raise a FormatError subclass on malformed input, else describe the container."""
    bit_length, table, payload = unpack_container(blob)
    _, _, payload_offset = locate_payload(blob)
    payload_end = payload_offset + byte_length(bit_length)

    decoded_size = None
    if full:
        decoded_size = len(decode_payload(payload, bit_length, table))

    return ContainerInfo(
        bit_length=bit_length,
        entries=len(table),
        table_size=payload_offset - HEADER_SIZE,
        payload_size=len(payload),
        # unpack ignores bytes after the payload; report them here
        trailing_bytes=len(blob) - payload_end,
        max_code_length=table.max_code_length,
        decoded_size=decoded_size,
    )


def verify_container_file(path: Path, *, full: bool = False) -> ContainerInfo:
    return verify_container(Path(path).read_bytes(), full=full)
