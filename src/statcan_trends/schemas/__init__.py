"""Pydantic configuration schemas for the statcan_trends pipeline.

All configuration validation, coercion, and normalization happens at
schema validation time via Pydantic.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Expert defaults (complete), including dataset presets
UserConfig : class
    User-facing configuration (forgiving, minimal)
CLIConfig : class
    Command-line operational overrides
"""

from statcan_trends.schemas.resolve import resolve_config
from statcan_trends.schemas.internal import InternalConfig, InternalDatasetConfig
from statcan_trends.schemas.param import ParamConfig, DatasetConfig
from statcan_trends.schemas.user import UserConfig
from statcan_trends.schemas.cli import CLIConfig

__all__ = [
    'resolve_config',
    'InternalConfig',
    'InternalDatasetConfig',
    'ParamConfig',
    'DatasetConfig',
    'UserConfig',
    'CLIConfig',
]
