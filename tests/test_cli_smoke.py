from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parents[1] / "src"


def _run_cli(*args: str, cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """Run huffbox CLI through a python -c wrapper.

    This avoids assuming the console-script entrypoint is installed.
    """
    cmd = [
        sys.executable,
        "-c",
        "from huffbox.cli import main; raise SystemExit(main())",
        *args,
    ]
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(SRC_DIR), env.get("PYTHONPATH")) if p)
    return subprocess.run(
        cmd,
        cwd=str(cwd) if cwd else None,
        env=env,
        text=True,
        capture_output=True,
    )


def test_cli_roundtrip(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    out = tmp_path / "out.hbx"
    back = tmp_path / "back.txt"

    data = "HELLO 123\nRIGA ARTICOLO: vite M3 qty=10 prezzo=1.20\n"
    inp.write_text(data, encoding="utf-8")

    r = _run_cli("compress", str(inp), str(out))
    assert r.returncode == 0, (r.stdout, r.stderr)

    r = _run_cli("verify", str(out), "--full")
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert r.stdout.startswith("OK")

    r = _run_cli("decompress", str(out), str(back))
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert back.read_text(encoding="utf-8") == data


def test_cli_empty_file(tmp_path: Path) -> None:
    inp = tmp_path / "empty"
    out = tmp_path / "empty.hbx"
    back = tmp_path / "back"
    inp.write_bytes(b"")

    assert _run_cli("compress", str(inp), str(out)).returncode == 0
    assert out.read_bytes().hex() == "00000000000100ff"
    assert _run_cli("decompress", str(out), str(back)).returncode == 0
    assert back.read_bytes() == b""


def test_cli_verify_json(tmp_path: Path) -> None:
    inp = tmp_path / "in.bin"
    out = tmp_path / "out.hbx"
    inp.write_bytes(b"ABAC")
    assert _run_cli("compress", str(inp), str(out)).returncode == 0

    r = _run_cli("verify", str(out), "--json")
    assert r.returncode == 0, (r.stdout, r.stderr)
    obj = json.loads(r.stdout)
    assert obj["schema"] == "huffbox.verify.v1"
    assert obj["ok"] is True
    assert obj["info"]["bit_length"] == 6
    assert obj["info"]["entries"] == 3


def test_cli_truncated_exit_11(tmp_path: Path) -> None:
    inp = tmp_path / "in.bin"
    out = tmp_path / "out.hbx"
    back = tmp_path / "back.bin"
    inp.write_bytes(b"some bytes to squeeze " * 10)
    assert _run_cli("compress", str(inp), str(out)).returncode == 0
    out.write_bytes(out.read_bytes()[:-1])

    r = _run_cli("decompress", str(out), str(back))
    assert r.returncode == 11
    assert "[huffbox]" in r.stderr
    assert not back.exists()

    r = _run_cli("verify", str(out), "--json")
    assert r.returncode == 11
    obj = json.loads(r.stderr)
    assert obj["ok"] is False
    assert obj["error"]["type"] == "TruncatedPayload"


def test_cli_decode_error_exit_12(tmp_path: Path) -> None:
    bad = tmp_path / "bad.hbx"
    bad.write_bytes(bytes.fromhex("00000005" "41010000420280004302c0ff" "4c"))

    r = _run_cli("verify", str(bad))
    assert r.returncode == 0, (r.stdout, r.stderr)

    r = _run_cli("verify", str(bad), "--full")
    assert r.returncode == 12
    assert "[huffbox]" in r.stderr


def test_cli_missing_input_exit_2(tmp_path: Path) -> None:
    r = _run_cli("compress", str(tmp_path / "nope"), str(tmp_path / "out"))
    assert r.returncode == 2
    assert "[huffbox]" in r.stderr


def test_cli_table_json(tmp_path: Path) -> None:
    f = tmp_path / "abac.hbx"
    f.write_bytes(bytes.fromhex("00000006" "41010000420280004302c0ff" "4c"))

    r = _run_cli("table", str(f), "--json")
    assert r.returncode == 0, (r.stdout, r.stderr)
    obj = json.loads(r.stdout)
    assert obj["bit_length"] == 6
    assert obj["entries"] == [
        {"symbol": 0x41, "code": "0"},
        {"symbol": 0x42, "code": "10"},
        {"symbol": 0x43, "code": "11"},
    ]

    r = _run_cli("table", str(f))
    assert r.returncode == 0
    assert "0x42\t2\t10" in r.stdout
