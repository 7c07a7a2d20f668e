import json
from pathlib import Path

import pytest

from cli.main import main


def _last_json(out: str) -> dict:
    return json.loads(out.strip().splitlines()[-1])


def test_cli_preset_with_overrides(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    main(["--preset", "xor3", "--epochs", "5", "--seed", "1"])
    out = capsys.readouterr().out
    payload = _last_json(out)
    assert payload["epochs"] == 5
    assert payload["steps"] == 5 * 8
    assert Path(payload["metrics"]).exists()
    assert Path(payload["manifest"]).exists()
    assert out.count("Predicted output: ") == 8


def test_cli_custom_data_file(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    data = tmp_path / "and.txt"
    data.write_text("0 0 0\n0 1 0\n1 0 0\n1 1 1\n\n")
    main(
        [
            "--data", str(data),
            "--inputs", "2",
            "--outputs", "1",
            "--hidden", "3,2",
            "--epochs", "3",
            "--run-dir", str(tmp_path / "run"),
            "--dump-config", str(tmp_path / "resolved.json"),
        ]
    )
    payload = _last_json(capsys.readouterr().out)
    assert payload["steps"] == 3 * 4
    resolved = json.loads((tmp_path / "resolved.json").read_text())
    assert resolved["model"]["hidden"] == [3, 2]
    assert resolved["data"] == {"path": str(data)}


def test_cli_config_override(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    override = tmp_path / "override.json"
    override.write_text(json.dumps({"train": {"epochs": 2, "report": False}}))
    main(["--preset", "xor2", "--config", str(override)])
    out = capsys.readouterr().out
    assert "Predicted output" not in out
    assert _last_json(out)["epochs"] == 2


def test_cli_yaml_config(tmp_path, monkeypatch, capsys):
    pytest.importorskip("yaml")
    monkeypatch.chdir(tmp_path)
    override = tmp_path / "override.yaml"
    override.write_text("train:\n  epochs: 1\n  lr: 0.05\n")
    main(["--preset", "xor2", "--config", str(override)])
    assert _last_json(capsys.readouterr().out)["epochs"] == 1


def test_cli_list_presets(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--list-presets"])
    assert exc.value.code == 0
    out = capsys.readouterr().out.split()
    assert "xor2" in out and "xor3" in out


def test_cli_rejects_bad_hidden_widths(capsys):
    with pytest.raises(SystemExit):
        main(["--hidden", "3,0"])


def test_cli_dumped_config_keeps_show_network(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    dump = tmp_path / "resolved.json"
    main(["--preset", "xor2", "--epochs", "1", "--show-network", "--dump-config", str(dump)])
    assert "Output layer" in capsys.readouterr().out
    resolved = json.loads(dump.read_text())
    assert resolved["train"]["show_network"] is True
