"""Configuration resolution and merging logic.

This module provides the single entrypoint for configuration resolution:
resolve_config(). It merges ParamConfig, UserConfig, and CLIConfig in
the correct precedence order and returns a validated InternalConfig.

Precedence (highest to lowest):
1. CLIConfig (command-line overrides)
2. UserConfig (user file)
3. ParamConfig (expert defaults)
"""

import os
from typing import Union, Optional
from statcan_trends.schemas.param import ParamConfig, DatasetConfig
from statcan_trends.schemas.user import UserConfig
from statcan_trends.schemas.cli import CLIConfig
from statcan_trends.schemas.internal import InternalConfig


def deep_merge(base: dict, *overrides: dict) -> dict:
    """Deep merge multiple dictionaries.

    Later dictionaries override earlier ones. Nested dictionaries are
    merged recursively; other values are replaced.

    Parameters
    ----------
    base : dict
        Base dictionary (lowest priority)
    *overrides : dict
        Override dictionaries (higher priority, left to right)

    Returns
    -------
    dict
        Merged dictionary

    Examples
    --------
    >>> base = {"a": 1, "b": {"c": 2, "d": 3}}
    >>> override = {"b": {"d": 4, "e": 5}, "f": 6}
    >>> deep_merge(base, override)
    {'a': 1, 'b': {'c': 2, 'd': 4, 'e': 5}, 'f': 6}
    """
    result = base.copy()

    for override in overrides:
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                # Recursive merge for nested dicts
                result[key] = deep_merge(result[key], value)
            else:
                # Replace value
                result[key] = value

    return result


def _check_datasets(merged: dict) -> None:
    """Cross-field dataset checks pydantic cannot express per field."""
    datasets = merged["datasets"]

    for name in merged["selected_datasets"]:
        if name not in datasets:
            raise ValueError(
                f"Unknown dataset '{name}'. Available: {sorted(datasets)}"
            )

    for name, ds in datasets.items():
        if ds["path"] is None and ds["product_id"] is None:
            raise ValueError(f"Dataset '{name}' needs a path or a product_id")

        canonical = set(ds["column_map"].values())
        needed = [ds["category_column"], ds["date_column"], ds["measure_column"], *ds["group_columns"]]
        unmapped = [c for c in needed if c not in canonical]
        if unmapped:
            raise ValueError(
                f"Dataset '{name}' refers to column(s) {unmapped} not produced by its column_map"
            )
        if ds["category_column"] not in ds["group_columns"]:
            raise ValueError(
                f"Dataset '{name}': category_column '{ds['category_column']}' must be one of group_columns"
            )
        if ds["facet_column"] is not None and ds["facet_column"] not in ds["group_columns"]:
            raise ValueError(
                f"Dataset '{name}': facet_column '{ds['facet_column']}' must be one of group_columns"
            )

        target = ds["merge_with"]
        if target is None:
            continue
        if target == name:
            raise ValueError(f"Dataset '{name}' cannot merge with itself")
        if target not in datasets:
            raise ValueError(
                f"Dataset '{name}' merges with unknown dataset '{target}'"
            )
        if ds["freq"] != "quarter":
            raise ValueError(
                f"Dataset '{name}' merges monthly data, so freq must be 'quarter'"
            )

        missing = [c for c in [ds["date_column"], ds["measure_column"], *ds["group_columns"]]
                   if c not in set(datasets[target]["column_map"].values())]
        if missing:
            raise ValueError(
                f"Dataset '{target}' lacks column(s) {missing} needed to merge into '{name}'"
            )


def resolve_config(
    param_cfg: Union[dict, ParamConfig],
    user_cfg: Optional[Union[dict, UserConfig]] = None,
    cli_cfg: Optional[Union[dict, CLIConfig]] = None,
) -> InternalConfig:
    """Resolve final runtime configuration from param, user, and CLI configs.

    This is the SINGLE ENTRYPOINT for configuration resolution. It validates
    and merges configs in the correct precedence order, then returns an
    immutable InternalConfig for runtime use.

    Parameters
    ----------
    param_cfg : dict or ParamConfig
        Expert configuration with complete defaults. Required.
    user_cfg : dict or UserConfig, optional
        User configuration with overrides. If None or empty, uses only param defaults.
    cli_cfg : dict or CLIConfig, optional
        Command-line overrides. If None or empty, no CLI overrides applied.

    Returns
    -------
    InternalConfig
        Fully validated, immutable runtime configuration

    Raises
    ------
    ValidationError
        If any config fails Pydantic validation
    ValueError
        If a selected or merged dataset name is unknown

    Examples
    --------
    >>> from statcan_trends.schemas import resolve_config, ParamConfig, UserConfig
    >>>
    >>> user = UserConfig(DATASETS={"grain_exports": {"scale": 1000}})
    >>> config = resolve_config(ParamConfig(), user)
    >>> config.datasets["grain_exports"].scale
    1000.0
    >>> config.data_dir
    'statcan_output/raw'
    """
    # Validate/convert inputs to Pydantic models
    if not isinstance(param_cfg, ParamConfig):
        param = ParamConfig.model_validate(param_cfg)
    else:
        param = param_cfg

    if user_cfg is None or (isinstance(user_cfg, dict) and not user_cfg):
        user = UserConfig()
    elif not isinstance(user_cfg, UserConfig):
        user = UserConfig.model_validate(user_cfg)
    else:
        user = user_cfg

    if cli_cfg is None or (isinstance(cli_cfg, dict) and not cli_cfg):
        cli = CLIConfig()
    elif not isinstance(cli_cfg, CLIConfig):
        cli = CLIConfig.model_validate(cli_cfg)
    else:
        cli = cli_cfg

    # Deep merge: param < user < cli
    merged = deep_merge(param.model_dump(), user.to_internal_overrides(), cli.to_internal_overrides())

    # Every dataset goes back through DatasetConfig so partial overrides
    # and user-defined datasets pick up field defaults
    merged["datasets"] = {
        name: DatasetConfig.model_validate(fields).model_dump()
        for name, fields in merged["datasets"].items()
    }

    if merged["data_dir"] is None:
        merged["data_dir"] = os.path.join(merged["base_dir"], "raw")

    if merged["selected_datasets"] is None:
        merged["selected_datasets"] = [
            name for name, ds in merged["datasets"].items() if ds["enabled"]
        ]

    _check_datasets(merged)

    # Validate and freeze as InternalConfig
    return InternalConfig.model_validate(merged)
