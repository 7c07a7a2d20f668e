"""Pipeline assembly: build a network from a config, train it and report."""

from __future__ import annotations

import json
import logging
import sys
from copy import deepcopy
from pathlib import Path
from typing import IO, Dict, List, Mapping, Sequence

from ..core.types import TrainResult
from ..data.training_data import fixture_path
from ..network import Network
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import JsonlSink
from ..reporting.plots import LossCurve
from ..reporting.report import format_layer, format_training_data

logger = logging.getLogger(__name__)

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor3": {
        "data": {"fixture": "xor3.txt"},
        "model": {"num_inputs": 3, "hidden": [4, 3, 3], "num_outputs": 1},
        "train": {
            "epochs": 10000,
            "lr": 0.01,
            "seed": 0,
            "run_dir": "runs/xor3",
            "enable_plots": False,
        },
    },
    "xor2": {
        "data": {"fixture": "xor2.txt"},
        "model": {"num_inputs": 2, "hidden": [3], "num_outputs": 1},
        "train": {
            "epochs": 5000,
            "lr": 0.01,
            "seed": 1,
            "run_dir": "runs/xor2",
            "enable_plots": False,
        },
    },
}

REQUIRED_SECTIONS = {"data", "model", "train"}


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Mapping[str, object]:
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        available = ", ".join(sorted(_PRESETS))
        raise KeyError(f"Unknown preset {name!r}. Available presets: {available}") from exc


def build_network(model_cfg: Mapping[str, object], seed: int | None = None) -> Network:
    hidden = _build_hidden(model_cfg)
    if not hidden:
        raise ValueError("Model config needs at least one hidden layer")
    network = Network(
        int(model_cfg.get("num_inputs", 1)),
        hidden[0],
        int(model_cfg.get("num_outputs", 1)),
        seed=seed,
    )
    for width in hidden[1:]:
        if not network.add_hidden_layer(width):
            raise MemoryError(f"Could not add a hidden layer of {width} nodes")
    return network


def load_data(network: Network, data_cfg: Mapping[str, object]) -> Mapping[str, object]:
    """Fill ``network``'s training data from ``data_cfg``; return provenance."""

    if "inputs" in data_cfg or "outputs" in data_cfg:
        inputs = data_cfg.get("inputs") or []
        outputs = data_cfg.get("outputs") or []
        if len(inputs) != len(outputs):  # type: ignore[arg-type]
            raise ValueError("Inline training data needs as many outputs as inputs")
        network.set_training_data(inputs, outputs)  # type: ignore[arg-type]
        return {"source": "inline", "sets": network.training_data.sets}

    if "path" in data_cfg:
        path = Path(str(data_cfg["path"]))
    elif "fixture" in data_cfg:
        path = fixture_path(str(data_cfg["fixture"]))
    else:
        raise KeyError("Data config needs one of `path`, `fixture` or `inputs`/`outputs`")
    network.load_training_data(path)
    return {"source": "file", "path": str(path), "sets": network.training_data.sets}


def run_pipeline(
    config: Mapping[str, object], *, stream: IO[str] | None = None
) -> TrainResult:
    missing = REQUIRED_SECTIONS - set(config)
    if missing:
        raise KeyError(f"Config is missing required sections: {', '.join(sorted(missing))}")
    data_cfg: Mapping[str, object] = config["data"]  # type: ignore[assignment]
    model_cfg: Mapping[str, object] = config["model"]  # type: ignore[assignment]
    train_cfg: Mapping[str, object] = config["train"]  # type: ignore[assignment]

    seed = train_cfg.get("seed")
    seed = int(seed) if seed is not None else None
    epochs = int(train_cfg.get("epochs", 1000))
    lr = float(train_cfg.get("lr", 0.01))
    run_dir = Path(str(train_cfg.get("run_dir", "runs/default")))

    network = build_network(model_cfg, seed)
    provenance = load_data(network, data_cfg)
    if not network.training_data.sets:
        logger.warning("No training data loaded; training will not update the network")

    _print_startup_summary(
        source=str(provenance.get("path", provenance["source"])),
        sets=network.training_data.sets,
        dims=network.describe().layer_dims,
        epochs=epochs,
        lr=lr,
        param_count=network.parameter_count(),
        stream=stream,
    )

    metrics_sink = JsonlSink(run_dir / "metrics.jsonl", seed=seed)
    curve = LossCurve(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))
    result = network.train(epochs, lr, callbacks=[metrics_sink, curve])
    curve.close()
    logger.info("Finished %d epochs, final loss %.6g", epochs, result.final_loss)

    manifest_path = write_manifest(
        run_dir / "manifest.json",
        config=json.loads(json.dumps(config)),
        data_provenance=provenance,
        network=network.describe(),
    )

    if train_cfg.get("show_network", False):
        _print_network(network, stream)
    if train_cfg.get("report", True):
        network.predict_range(stream=stream)

    return TrainResult(
        epochs=result.epochs,
        steps=result.steps,
        final_loss=result.final_loss,
        metrics_path=str(metrics_sink.path),
        manifest_path=manifest_path,
    )


def _build_hidden(config: Mapping[str, object]) -> List[int]:
    if "hidden" in config:
        return [int(h) for h in config["hidden"]]  # type: ignore[union-attr]
    hidden_dim = int(config.get("hidden_dim", 4))
    depth = int(config.get("depth", 1))
    return [hidden_dim for _ in range(depth)]


def _print_network(network: Network, stream: IO[str] | None) -> None:
    out = stream or sys.stdout
    out.write(format_training_data(network.training_data))
    for idx, layer in enumerate(network.hidden_layers, start=1):
        out.write(f"Hidden layer {idx}\n")
        out.write(format_layer(layer))
    out.write("Output layer\n")
    out.write(format_layer(network.output_layer))


def _print_startup_summary(
    *,
    source: str,
    sets: int,
    dims: Sequence[int],
    epochs: int,
    lr: float,
    param_count: int,
    stream: IO[str] | None = None,
) -> None:
    out = stream or sys.stdout
    print("=== mlpnet run ===", file=out)
    print(f"Training data : {source} ({sets} sets)", file=out)
    print(f"Dimensions    : {list(dims)}", file=out)
    print(f"Epochs        : {epochs}", file=out)
    print(f"Learning rate : {lr}", file=out)
    print(f"Parameters    : {param_count}", file=out)
    print("==================", file=out)


__all__ = ["build_network", "load_data", "load_preset", "presets", "run_pipeline"]
