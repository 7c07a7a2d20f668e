"""Run manifest helpers."""

from __future__ import annotations

import json
import os
import platform
import time
from pathlib import Path
from typing import Mapping

from ..core.types import NetworkDescription
from .metrics import git_sha


def write_manifest(
    path: str | Path,
    *,
    config: Mapping[str, object],
    data_provenance: Mapping[str, object],
    network: NetworkDescription,
) -> str:
    """Write a manifest JSON file capturing reproducibility metadata."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    manifest = {
        "git_sha": git_sha(),
        "generated_at": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "config": config,
        "data": dict(data_provenance),
        "network": {"layer_dims": list(network.layer_dims)},
        "environment": {
            "python": platform.python_version(),
            "log_level": os.environ.get("MLPNET_LOG_LEVEL", "WARNING"),
        },
    }
    path.write_text(json.dumps(manifest, indent=2))
    return str(path)
