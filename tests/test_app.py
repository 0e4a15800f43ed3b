import json

from cross_hinge.app import main
from cross_hinge.core.config import HingeConfig


def test_defaults_print_analysis(capsys):
    assert main(["--percent", "50", "--sweep", "10"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["analysis"]["crossed"] is True
    assert out["state"] is not None
    assert len(out["lid_outline"]) == 4
    assert out["sweep"]["n_steps"] == 10


def test_config_file_and_unlock_flag(tmp_path, capsys):
    path = tmp_path / "hinge.json"
    path.write_text(HingeConfig().to_json(), encoding="utf-8")
    assert main([str(path), "--unlocked"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["analysis"]["lock_mode"] == "unlocked"


def test_missing_file_is_an_error(tmp_path, capsys):
    assert main([str(tmp_path / "nope.json")]) == 1
    assert "error" in capsys.readouterr().err
