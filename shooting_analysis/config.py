"""
Config loader for the shooting incident analysis.

Settings live in the configs/ directory as YAML files, one per concern:

    configs/pipeline.yaml        — data source, cleaning rules, output paths
    configs/model_training.yaml  — split fraction, seed, classifier settings

Usage:

    from shooting_analysis.config import load_config

    cfg = load_config("pipeline")
    url = cfg["source"]["url"]

    train_cfg = load_config("model_training")
    seed = train_cfg["split"]["seed"]

Set SHOOTING_ANALYSIS_CONFIG_DIR to point the loader at another directory
(the test suite does this with a tmp_path copy).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

_DEFAULT_CONFIGS_DIR = Path(__file__).parent.parent / "configs"


def configs_dir() -> Path:
    """Return the directory config files are read from."""
    override = os.getenv("SHOOTING_ANALYSIS_CONFIG_DIR")
    return Path(override) if override else _DEFAULT_CONFIGS_DIR


def load_config(name: str) -> dict[str, Any]:
    """
    Load a named YAML config file from the configs directory.

    Args:
        name: Config file name without the .yaml extension.
              Valid options: "pipeline", "model_training".

    Returns:
        The parsed YAML contents as a nested dictionary. An empty file
        yields an empty dict rather than None.

    Raises:
        FileNotFoundError: If <configs>/<name>.yaml does not exist.
        yaml.YAMLError: If the file contains invalid YAML.
    """
    directory = configs_dir()
    path = directory / f"{name}.yaml"
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            f"Expected one of: {sorted(p.stem for p in directory.glob('*.yaml'))}"
        )
    with path.open(encoding="utf-8") as f:
        return yaml.safe_load(f) or {}
