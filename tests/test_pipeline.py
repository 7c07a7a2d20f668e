from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from mlpnet.training import pipelines


def _config(tmp_path: Path, **train) -> dict:
    config = {
        "data": {"fixture": "xor2.txt"},
        "model": {"num_inputs": 2, "hidden": [3, 2], "num_outputs": 1},
        "train": {
            "epochs": 20,
            "lr": 0.01,
            "seed": 3,
            "run_dir": str(tmp_path / "run"),
            "enable_plots": False,
        },
    }
    config["train"].update(train)
    return config


def test_presets_are_complete():
    names = set(pipelines.presets())
    assert {"xor2", "xor3"} <= names
    for name in names:
        assert pipelines.REQUIRED_SECTIONS <= set(pipelines.load_preset(name))
    with pytest.raises(KeyError):
        pipelines.load_preset("missing")


def test_build_network_from_model_config():
    network = pipelines.build_network({"num_inputs": 3, "hidden": [4, 3, 3], "num_outputs": 1})
    assert network.describe().layer_dims == [3, 4, 3, 3, 1]
    network = pipelines.build_network({"num_inputs": 2, "hidden_dim": 5, "depth": 2})
    assert network.describe().layer_dims == [2, 5, 5, 1]
    with pytest.raises(ValueError):
        pipelines.build_network({"hidden": []})


def test_run_pipeline_writes_metrics_and_manifest(tmp_path, capsys):
    result = pipelines.run_pipeline(_config(tmp_path))
    out = capsys.readouterr().out
    assert "=== mlpnet run ===" in out
    assert out.count("Predicted output: ") == 4

    records = [json.loads(line) for line in Path(result.metrics_path).read_text().splitlines()]
    assert [r["epoch"] for r in records] == list(range(1, 21))
    assert all("loss" in r for r in records)
    assert records[-1]["loss"] == pytest.approx(result.final_loss)

    manifest = json.loads(Path(result.manifest_path).read_text())
    assert manifest["network"]["layer_dims"] == [2, 3, 2, 1]
    assert manifest["data"]["sets"] == 4
    assert result.steps == 20 * 4


def test_run_pipeline_is_deterministic(tmp_path):
    first = pipelines.run_pipeline(_config(tmp_path / "a", report=False))
    second = pipelines.run_pipeline(_config(tmp_path / "b", report=False))
    assert Path(first.metrics_path).read_bytes() == Path(second.metrics_path).read_bytes()


def test_run_pipeline_with_inline_data(tmp_path):
    config = _config(tmp_path, report=False)
    config["data"] = {"inputs": [[0, 1], [1, 1]], "outputs": [[1], [0]]}
    result = pipelines.run_pipeline(config)
    assert result.steps == 20 * 2


def test_run_pipeline_with_missing_file_trains_nothing(tmp_path):
    config = _config(tmp_path, report=False)
    config["data"] = {"path": str(tmp_path / "nope.txt")}
    result = pipelines.run_pipeline(config)
    assert result.steps == 0
    assert result.final_loss == 0.0


def test_run_pipeline_requires_sections():
    with pytest.raises(KeyError):
        pipelines.run_pipeline({"model": {}, "train": {}})


def test_show_network_prints_layers(tmp_path, capsys):
    pipelines.run_pipeline(_config(tmp_path, show_network=True, epochs=1))
    out = capsys.readouterr().out
    assert "Number of training sets: 4" in out
    assert "Hidden layer 2" in out
    assert "Output layer" in out


def test_loss_curve_is_written_when_enabled(tmp_path):
    pytest.importorskip("matplotlib")
    pipelines.run_pipeline(_config(tmp_path, enable_plots=True, report=False))
    assert (tmp_path / "run" / "loss.png").exists()


def test_run_pipeline_writes_everything_to_given_stream(tmp_path, capsys):
    stream = io.StringIO()
    pipelines.run_pipeline(_config(tmp_path, show_network=True, epochs=1), stream=stream)
    text = stream.getvalue()
    assert "=== mlpnet run ===" in text
    assert "Output layer" in text
    assert text.count("Predicted output: ") == 4
    assert capsys.readouterr().out == ""
