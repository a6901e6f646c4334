from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict

import yaml


def _manifest_dir() -> Path:
    return Path(__file__).resolve().parent


def load_yaml_file(path: Path) -> Dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Manifest must be a mapping/dict: {path}")
    return data


def load_default_profile() -> Dict[str, Any]:
    return load_yaml_file(_manifest_dir() / "default.yaml")


def merge_config(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge mappings; lists and scalars from overlay replace."""

    out = copy.deepcopy(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = merge_config(out[key], value)
        else:
            out[key] = copy.deepcopy(value)
    return out
