"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs with uppercase aliases for the common
settings (e.g., BASE_DIR -> base_dir, LOG_LEVEL -> logging.level).

Users only specify what they want to override from the expert defaults.
Dataset overrides are partial: ``DATASETS={"grain_exports": {"scale": 1e3}}``
changes one field of a preset and keeps the rest.
"""

from typing import Any, Literal, Optional
from pydantic import Field, field_validator
from statcan_trends.schemas.base import TrendsBaseModel


class UserVisualizationConfig(TrendsBaseModel):
    """User-facing visualization config."""
    enabled: Optional[bool] = None
    dpi: Optional[int] = None
    figsize: Optional[tuple[float, float]] = None
    output_format: Optional[str] = None
    facet_columns: Optional[int] = None
    max_levels: Optional[int] = None
    highlight_color: Optional[str] = None
    muted_color: Optional[str] = None
    linewidth: Optional[float] = None
    bar_chart: Optional[bool] = None

    @field_validator("output_format", mode="before")
    @classmethod
    def normalize_format(cls, v):
        """Normalize format names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip().lstrip(".")
        return v


class UserOutputConfig(TrendsBaseModel):
    """User-facing output config."""
    write_csv: Optional[bool] = None
    float_format: Optional[str] = None


class UserConfig(TrendsBaseModel):
    """User-facing configuration schema.

    Minimal, forgiving, and uses common aliases. Users only specify
    what they want to override from ParamConfig defaults.

    Usage
    -----
        user_cfg = UserConfig(
            BASE_DIR="/data/statcan",
            LOG_LEVEL="debug",
            DATASETS={"grain_exports": {"product_id": "32100008"}},
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    # Top-level operational settings
    base_dir: Optional[str] = Field(None, alias="BASE_DIR")
    data_dir: Optional[str] = Field(None, alias="DATA_DIR")
    download: Optional[bool] = Field(None, alias="DOWNLOAD")
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = Field(None, alias="LOG_LEVEL")
    selected_datasets: Optional[list[str]] = Field(None, alias="RUN_DATASETS")

    # Per-dataset partial overrides, validated once merged with the presets
    datasets: Optional[dict[str, dict[str, Any]]] = Field(None, alias="DATASETS")

    # Nested overrides
    visualization: Optional[UserVisualizationConfig] = None
    output: Optional[UserOutputConfig] = None

    model_config = TrendsBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept lowercase level names."""
        if isinstance(v, str):
            return v.upper().strip()
        return v

    @field_validator("selected_datasets", mode="before")
    @classmethod
    def coerce_selected(cls, v):
        """Accept a single dataset name."""
        if isinstance(v, str):
            return [v]
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.base_dir is not None:
            overrides["base_dir"] = str(self.base_dir)
        if self.data_dir is not None:
            overrides["data_dir"] = str(self.data_dir)
        if self.download is not None:
            overrides["download"] = self.download
        if self.selected_datasets is not None:
            overrides["selected_datasets"] = list(self.selected_datasets)

        if self.datasets:
            overrides["datasets"] = {name: dict(fields) for name, fields in self.datasets.items()}

        if self.visualization is not None:
            visualization = self.visualization.model_dump(exclude_none=True)
            if visualization:
                overrides["visualization"] = visualization

        if self.output is not None:
            output = self.output.model_dump(exclude_none=True)
            if output:
                overrides["output"] = output

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
