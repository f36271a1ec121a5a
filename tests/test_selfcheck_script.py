import runpy
from pathlib import Path

import pytest

from cipherkit.utils.repro import read_json

SCRIPT = Path(__file__).parent.parent / "scripts" / "run_selfcheck.py"


def test_selfcheck_script_writes_report(tmp_path, capsys):
    module = runpy.run_path(str(SCRIPT))
    code = module["main"]([
        "--algorithms", "DES", "AES-128",
        "--vectors", "2",
        "--avalanche-trials", "1",
        "--output-dir", str(tmp_path),
    ])
    assert code == 0

    reports = list(tmp_path.glob("*_selfcheck.json"))
    assert len(reports) == 1
    data = read_json(reports[0])
    assert data["summary"]["roundtrip_all_pass"] is True
    assert len(data["roundtrip"]) == 4
    assert len(data["avalanche"]) == 4
    assert len(data["sbox"]) == 30
    assert "Roundtrip Tests: 4/4 pass" in capsys.readouterr().out


def test_selfcheck_script_rejects_unknown_algorithm(tmp_path, capsys):
    module = runpy.run_path(str(SCRIPT))
    with pytest.raises(SystemExit) as exc:
        module["main"](["--algorithms", "DES", "FOO", "--output-dir", str(tmp_path)])
    assert exc.value.code == 2
    assert "unknown algorithm(s): FOO" in capsys.readouterr().err
    assert list(tmp_path.iterdir()) == []
