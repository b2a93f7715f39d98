"""
Scoring configuration loader.

Loads quill/config/scoring.yaml (or the file named by QUILL_SCORING_CONFIG)
once per process and hands out a read-only view of it.

Example:
    >>> from quill.utils.config import load_scoring_config
    >>> config = load_scoring_config()
    >>> config["aggregation"]["pass_threshold"]
    70
"""

import os
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

import yaml
from dotenv import load_dotenv
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

from quill.utils.exceptions import ValidationError

load_dotenv()

DEFAULT_SCORING_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "scoring.yaml"

REQUIRED_SECTIONS = ("aggregation", "grammar", "ats", "readability")


def _freeze(value: Any) -> Any:
    """Recursively convert dicts to MappingProxyType and lists to tuples."""
    if isinstance(value, dict):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(item) for item in value)
    return value


def resolve_config_path(config_path: Optional[Path] = None) -> Path:
    """Explicit path wins, then QUILL_SCORING_CONFIG, then the packaged default."""
    if config_path is not None:
        return Path(config_path)
    env_path = os.getenv("QUILL_SCORING_CONFIG")
    return Path(env_path) if env_path else DEFAULT_SCORING_CONFIG_PATH


@lru_cache(maxsize=None)
def _load_cached(config_path: Path) -> Mapping[str, Any]:
    if not config_path.exists():
        raise ValidationError("Scoring config not found", detail=str(config_path))

    try:
        data = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)
    except (OmegaConfBaseException, yaml.YAMLError) as e:
        raise ValidationError(
            f"Scoring config could not be parsed: {e}", detail=str(config_path)
        ) from e

    if not isinstance(data, dict):
        raise ValidationError("Scoring config must be a mapping", detail=str(config_path))

    missing = [name for name in REQUIRED_SECTIONS if name not in data]
    if missing:
        raise ValidationError(
            f"Scoring config missing sections: {', '.join(missing)}", detail=str(config_path)
        )

    return _freeze(data)


def load_scoring_config(config_path: Optional[Path] = None) -> Mapping[str, Any]:
    """
    Load the scoring config as a read-only nested mapping.

    Args:
        config_path: Optional explicit path (defaults to QUILL_SCORING_CONFIG or packaged file)

    Returns:
        Read-only mapping of config sections

    Raises:
        ValidationError: If the file is missing, unparsable or lacks a section
    """
    return _load_cached(resolve_config_path(config_path).resolve())
