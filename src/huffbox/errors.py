"""Typed errors for huffbox.

Single source of truth for exit codes lives here.

Policy:
- Errors are small and boring.
- Truncation ("no more input") and corruption ("malformed container") are
  distinct kinds, so callers can tell them apart.
- The CLI maps errors to stable exit codes (see EXIT_* constants).
- docs/exit_codes.md is generated from this module (scripts/gen_exit_codes_md.py).
"""

from __future__ import annotations

from dataclasses import dataclass

# -------------------------
# Exit codes (single source)
# -------------------------

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_GENERIC = 10
EXIT_TRUNCATED = 11
EXIT_DECODE = 12
EXIT_LIMIT = 13


@dataclass(frozen=True, slots=True)
class ExitCodeInfo:
    code: int
    name: str
    description: str


EXIT_CODES: tuple[ExitCodeInfo, ...] = (
    ExitCodeInfo(EXIT_OK, "OK", "Success"),
    ExitCodeInfo(EXIT_USAGE, "USAGE", "Usage error (invalid args, missing input file, etc.)"),
    ExitCodeInfo(EXIT_GENERIC, "GENERIC", "Generic failure (malformed table entry, unexpected error, etc.)"),
    ExitCodeInfo(EXIT_TRUNCATED, "TRUNCATED", "Container ended early (header, table or payload)"),
    ExitCodeInfo(EXIT_DECODE, "DECODE", "Payload bits do not match the code table"),
    ExitCodeInfo(EXIT_LIMIT, "LIMIT", "Format limit exceeded (code > 255 bits, payload > 2^32-1 bits)"),
)

_EXIT_CODE_BY_CODE: dict[int, ExitCodeInfo] = {e.code: e for e in EXIT_CODES}


def exit_code_info(code: int) -> ExitCodeInfo | None:
    return _EXIT_CODE_BY_CODE.get(int(code))


def render_exit_codes_markdown() -> str:
    """Render docs/exit_codes.md content."""
    lines: list[str] = []
    lines.append("# Exit codes\n")
    lines.append("> GENERATED FILE, do not edit manually.\n")
    lines.append("> Source of truth: `src/huffbox/errors.py` (EXIT_CODES).\n")
    lines.append("> Regenerate: `python scripts/gen_exit_codes_md.py`.\n\n")
    lines.append("These are the CLI exit codes you can rely on.\n\n")
    lines.append("| Code | Name | Meaning |\n")
    lines.append("|---:|---|---|\n")
    for e in sorted(EXIT_CODES, key=lambda x: x.code):
        lines.append(f"| {e.code} | `{e.name}` | {e.description} |\n")
    lines.append("\n## Notes\n")
    lines.append("- All library errors extend `HuffboxError` and carry an `exit_code`.\n")
    lines.append("- `--debug` re-raises errors to show full stack traces.\n")
    lines.append(
        "- `--json` on `verify` prints a JSON object to stdout (ok) or stderr (error), and returns the same exit code.\n"
    )
    return "".join(lines)


# ---------------
# Typed exceptions
# ---------------


class HuffboxError(Exception):
    """Base error for huffbox."""

    exit_code: int = EXIT_GENERIC


class UsageError(HuffboxError):
    exit_code = EXIT_USAGE


class FormatError(HuffboxError):
    """The container bytes are not a well-formed huffbox container."""

    exit_code = EXIT_GENERIC


class TruncatedError(FormatError):
    exit_code = EXIT_TRUNCATED


class TruncatedHeader(TruncatedError):
    pass


class TruncatedTable(TruncatedError):
    pass


class TruncatedPayload(TruncatedError):
    pass


class BadTableEntry(FormatError):
    pass


class DecodeError(FormatError):
    exit_code = EXIT_DECODE


class UnmatchedTrailingBits(DecodeError):
    pass


class InvalidCode(DecodeError):
    pass


class LimitExceeded(HuffboxError):
    exit_code = EXIT_LIMIT


class CodeTooLong(LimitExceeded):
    pass


class PayloadTooLarge(LimitExceeded):
    pass


class EmptyTable(HuffboxError):
    """A code table must hold at least one entry."""
