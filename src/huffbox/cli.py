"""huffbox CLI.

This is the stable CLI entrypoint (console-script: ``huffbox``).

Notes:
  - --version is supported at top-level.
  - verify supports --json (machine-readable output, stdout on success,
    stderr on error, same exit code either way).
  - Exit codes come from huffbox.errors (EXIT_CODES).
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from huffbox.errors import EXIT_GENERIC, EXIT_OK, HuffboxError, UsageError

VERIFY_SCHEMA = "huffbox.verify.v1"
TABLE_SCHEMA = "huffbox.table.v1"


def _pkg_version() -> str:
    try:
        from importlib.metadata import PackageNotFoundError, version

        try:
            return version("huffbox")
        except PackageNotFoundError:
            # editable install but script invoked from source, or metadata missing
            return "0+unknown"
    except Exception:
        return "0+unknown"


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--debug", action="store_true", help="Show stack traces on errors")


def _read_input(path: Path) -> bytes:
    if not path.is_file():
        raise UsageError(f"input file not found: {path}")
    return path.read_bytes()


def _print_verify_json(target: Path, *, full: bool, info: dict) -> None:
    print(
        json.dumps(
            {
                "schema": VERIFY_SCHEMA,
                "ok": True,
                "target": str(target),
                "full": bool(full),
                "version": _pkg_version(),
                "info": info,
            },
            ensure_ascii=False,
            separators=(",", ":"),
        )
    )


def _print_verify_json_error(target: Path, *, full: bool, err_type: str, message: str) -> None:
    """Emit stable JSON on stderr for verify errors when --json is used."""
    obj = {
        "schema": VERIFY_SCHEMA,
        "ok": False,
        "target": str(target),
        "full": bool(full),
        "version": _pkg_version(),
        "error": {"type": err_type, "message": message},
    }
    print(json.dumps(obj, ensure_ascii=False, sort_keys=True), file=sys.stderr)


def _cmd_compress(input_path: Path, output_path: Path) -> int:
    from huffbox.engine.container import compress

    data = _read_input(input_path)
    blob = compress(data)
    output_path.write_bytes(blob)
    print(f"{input_path} -> {output_path} ({len(data)} -> {len(blob)} bytes)")
    return EXIT_OK


def _cmd_decompress(input_path: Path, output_path: Path) -> int:
    from huffbox.engine.container import decompress

    data = decompress(_read_input(input_path))
    output_path.write_bytes(data)
    print(f"{input_path} -> {output_path} ({len(data)} bytes)")
    return EXIT_OK


def _cmd_verify(input_path: Path, *, full: bool, json_out: bool) -> int:
    from huffbox.verify import verify_container

    try:
        info = verify_container(_read_input(input_path), full=full)
    except HuffboxError as e:
        if json_out:
            _print_verify_json_error(
                input_path, full=full, err_type=type(e).__name__, message=str(e)
            )
            return int(e.exit_code)
        raise

    if json_out:
        _print_verify_json(input_path, full=full, info=info.to_dict())
    else:
        print(
            f"OK bits={info.bit_length} entries={info.entries} "
            f"table={info.table_size}B payload={info.payload_size}B"
            + (f" decoded={info.decoded_size}B" if info.decoded_size is not None else "")
        )
    return EXIT_OK


def _cmd_table(input_path: Path, *, json_out: bool) -> int:
    from huffbox.engine.container import locate_payload

    bit_length, table, _ = locate_payload(_read_input(input_path))
    if json_out:
        print(
            json.dumps(
                {
                    "schema": TABLE_SCHEMA,
                    "bit_length": bit_length,
                    "entries": [{"symbol": sym, "code": code} for sym, code in table.as_dict().items()],
                },
                separators=(",", ":"),
            )
        )
        return EXIT_OK

    print(f"bit_length={bit_length} entries={len(table)}")
    for sym, code in table.as_dict().items():
        print(f"0x{sym:02x}\t{len(code)}\t{code}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="huffbox", description="Huffman byte container tool")
    p.add_argument("--version", action="version", version=f"huffbox {_pkg_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_c = sub.add_parser("compress", help="Compress a file into a container")
    p_c.add_argument("input", type=Path)
    p_c.add_argument("output", type=Path)
    _add_common_args(p_c)

    p_d = sub.add_parser("decompress", help="Restore the original bytes from a container")
    p_d.add_argument("input", type=Path)
    p_d.add_argument("output", type=Path)
    _add_common_args(p_d)

    p_v = sub.add_parser("verify", help="Verify a container file")
    p_v.add_argument("input", type=Path)
    p_v.add_argument("--full", action="store_true", help="Also decode the whole payload")
    p_v.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
    _add_common_args(p_v)

    p_t = sub.add_parser("table", help="Dump the code table of a container")
    p_t.add_argument("input", type=Path)
    p_t.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
    _add_common_args(p_t)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    p = build_parser()
    ns = p.parse_args(argv)

    try:
        if ns.cmd == "compress":
            return _cmd_compress(ns.input, ns.output)
        if ns.cmd == "decompress":
            return _cmd_decompress(ns.input, ns.output)
        if ns.cmd == "verify":
            return _cmd_verify(ns.input, full=bool(ns.full), json_out=bool(ns.json))
        if ns.cmd == "table":
            return _cmd_table(ns.input, json_out=bool(ns.json))
        raise AssertionError("unreachable")

    except SystemExit:
        raise
    except HuffboxError as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[huffbox] {e}", file=sys.stderr)
        return int(getattr(e, "exit_code", EXIT_GENERIC) or EXIT_GENERIC)
    except Exception as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[huffbox] error: {e}", file=sys.stderr)
        return EXIT_GENERIC


if __name__ == "__main__":
    raise SystemExit(main())
