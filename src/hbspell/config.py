"""
Configuration for hbspell.

Settings come from defaults, then an optional YAML file, then environment
variables:

    HBSPELL_DICTIONARIES   dictionary paths, os.pathsep separated
    HBSPELL_BRANCH_ORDER   "document" or "alternate-first"
    HBSPELL_MAX_WORKERS    oracle thread pool size

Example file:

    dictionaries:
      - /usr/share/hunspell/en_US.dic
    extra_words: [Handlebars, signup]
    skip_tags: [script, style]
    branch_order: document
    flush_at_end: true
    max_workers: 8
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from hbspell.extractor import BranchOrder
from hbspell.tokenizer import DEFAULT_SKIP_TAGS


class ConfigError(Exception):
    """Raised when a configuration value is invalid."""
    pass


@dataclass
class SpellcheckConfig:
    """Settings for one spell-checking run."""

    dictionaries: List[str] = field(default_factory=list)
    extra_words: List[str] = field(default_factory=list)
    skip_tags: List[str] = field(default_factory=lambda: sorted(DEFAULT_SKIP_TAGS))
    branch_order: BranchOrder = BranchOrder.DOCUMENT
    flush_at_end: bool = True
    max_workers: Optional[int] = None


_KNOWN_KEYS = {
    "dictionaries",
    "extra_words",
    "skip_tags",
    "branch_order",
    "flush_at_end",
    "max_workers",
}


def _string_list(key: str, value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings, got {value!r}")
    return list(value)


def _branch_order(value: Any) -> BranchOrder:
    if isinstance(value, BranchOrder):
        return value
    try:
        return BranchOrder(str(value).lower())
    except ValueError:
        choices = ", ".join(o.value for o in BranchOrder)
        raise ConfigError(f"'branch_order' must be one of: {choices}; got {value!r}")


def _max_workers(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        workers = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"'max_workers' must be an integer, got {value!r}")
    if workers < 1:
        raise ConfigError(f"'max_workers' must be at least 1, got {workers}")
    return workers


def config_from_dict(d: Mapping[str, Any], base: Optional[SpellcheckConfig] = None) -> SpellcheckConfig:
    """
    Apply a settings mapping on top of `base` (defaults if None).

    Raises:
        ConfigError: If a value has the wrong type
    """
    config = base if base is not None else SpellcheckConfig()

    for key in sorted(set(d) - _KNOWN_KEYS):
        warnings.warn(f"Unknown configuration key: {key}", UserWarning)

    if "dictionaries" in d:
        config.dictionaries = _string_list("dictionaries", d["dictionaries"])
    if "extra_words" in d:
        config.extra_words = _string_list("extra_words", d["extra_words"])
    if "skip_tags" in d:
        config.skip_tags = _string_list("skip_tags", d["skip_tags"])
    if "branch_order" in d:
        config.branch_order = _branch_order(d["branch_order"])
    if "flush_at_end" in d:
        if not isinstance(d["flush_at_end"], bool):
            raise ConfigError(f"'flush_at_end' must be true or false, got {d['flush_at_end']!r}")
        config.flush_at_end = d["flush_at_end"]
    if "max_workers" in d:
        config.max_workers = _max_workers(d["max_workers"])

    return config


def _load_from_env(environ: Mapping[str, str]) -> Dict[str, Any]:
    env_config: Dict[str, Any] = {}

    dictionaries = environ.get("HBSPELL_DICTIONARIES")
    if dictionaries:
        env_config["dictionaries"] = [p for p in dictionaries.split(os.pathsep) if p]

    branch_order = environ.get("HBSPELL_BRANCH_ORDER")
    if branch_order:
        env_config["branch_order"] = branch_order

    max_workers = environ.get("HBSPELL_MAX_WORKERS")
    if max_workers:
        env_config["max_workers"] = max_workers

    return env_config


def load_config(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> SpellcheckConfig:
    """
    Load configuration from a YAML file and the environment.

    Args:
        path: YAML file; a missing file means defaults
        environ: Environment mapping (os.environ if None)

    Returns:
        SpellcheckConfig

    Raises:
        ConfigError: If the file is not a mapping or holds invalid values
    """
    config = SpellcheckConfig()

    if path is not None and Path(path).exists():
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {path}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration in {path} must be a mapping")
        config = config_from_dict(data, base=config)

    env = os.environ if environ is None else environ
    return config_from_dict(_load_from_env(env), base=config)


def config_to_dict(config: SpellcheckConfig) -> Dict[str, Any]:
    return {
        "dictionaries": list(config.dictionaries),
        "extra_words": list(config.extra_words),
        "skip_tags": list(config.skip_tags),
        "branch_order": config.branch_order.value,
        "flush_at_end": config.flush_at_end,
        "max_workers": config.max_workers,
    }


def config_to_yaml(config: SpellcheckConfig) -> str:
    return yaml.safe_dump(config_to_dict(config), default_flow_style=False)
