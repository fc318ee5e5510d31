#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
clustree Configuration

Explicit configuration for building and drawing clustering trees. Every
recognised option is a field of ``ClustreeConfig``; YAML files are merged
over the defaults and unknown keys are rejected.
"""

import os
import yaml
import logging
from dataclasses import dataclass, field, fields, asdict
from typing import Dict, Any, Optional, List, Union

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

LAYOUTS = ("tree", "sugiyama")

NODE_AESTHETICS = ("colour", "size", "alpha")
EDGE_AESTHETICS = ("colour", "width", "alpha")


@dataclass
class ClustreeConfig:
    """Configuration parameters for building and drawing a clustering tree"""
    prefix: Optional[str] = None
    suffix: Optional[str] = None
    columns: Optional[List[str]] = None
    attributes: Dict[str, Union[str, List[str]]] = field(default_factory=dict)
    count_filter: int = 0
    prop_filter: float = 0.1
    compute_stability: bool = False
    layout: str = "tree"
    node_aesthetics: Dict[str, Any] = field(default_factory=dict)
    edge_aesthetics: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.columns is not None:
            self.columns = list(self.columns)
        if self.count_filter < 0:
            raise ConfigurationError(
                f"count_filter must be >= 0, got {self.count_filter}", "count_filter")
        if not 0 <= self.prop_filter <= 1:
            raise ConfigurationError(
                f"prop_filter must be within [0, 1], got {self.prop_filter}", "prop_filter")
        if self.layout not in LAYOUTS:
            raise ConfigurationError(
                f"Unknown layout '{self.layout}'. Use one of: {', '.join(LAYOUTS)}", "layout")
        _check_keys(self.node_aesthetics, NODE_AESTHETICS, "node_aesthetics")
        _check_keys(self.edge_aesthetics, EDGE_AESTHETICS, "edge_aesthetics")

    def to_dict(self) -> Dict[str, Any]:
        """Return the configuration as a plain dictionary"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ClustreeConfig":
        """Build a configuration from a dictionary, rejecting unknown keys"""
        data = data or {}
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration key(s): {', '.join(unknown)}", unknown[0])
        return cls(**data)


def _check_keys(mapping: Dict[str, Any], allowed, name: str):
    unknown = sorted(set(mapping) - set(allowed))
    if unknown:
        raise ConfigurationError(
            f"Unknown {name} key(s): {', '.join(unknown)}. "
            f"Recognised: {', '.join(allowed)}", name)


def merge_configs(default: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge user configuration over defaults"""
    result = dict(default)
    for key, value in user.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: Optional[str] = None, **overrides) -> ClustreeConfig:
    """
    Load configuration from a YAML file merged over the defaults.

    Parameters
    ----------
    config_path : str, optional
        Path to a YAML file. ``None`` uses the defaults.
    **overrides
        Field values applied after the file, e.g. from command-line flags.
        ``None`` values are ignored.

    Returns
    -------
    ClustreeConfig
    """
    config = ClustreeConfig().to_dict()

    if config_path is not None:
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Config file not found: {config_path}", "config_path")
        logger.info(f"Loading configuration from: {config_path}")
        with open(config_path, 'r') as f:
            user_config = yaml.safe_load(f) or {}
        if not isinstance(user_config, dict):
            raise ConfigurationError(
                f"Config file {config_path} must contain a mapping at top level", "config_path")
        _check_unknown(user_config)
        config = merge_configs(config, user_config)

    user_overrides = {k: v for k, v in overrides.items() if v is not None}
    _check_unknown(user_overrides)
    config = merge_configs(config, user_overrides)

    return ClustreeConfig.from_dict(config)


def _check_unknown(data: Dict[str, Any]):
    known = {f.name for f in fields(ClustreeConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration key(s): {', '.join(unknown)}", unknown[0])


def save_config(config: ClustreeConfig, output_path: str):
    """Write configuration to a YAML file"""
    with open(output_path, 'w') as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
    logger.info(f"Configuration saved: {output_path}")
