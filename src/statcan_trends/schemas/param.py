"""ParamConfig: Expert defaults for the statcan_trends pipeline.

This module defines the complete default configuration, including the
dataset presets for the three StatCan series the project was built around.
ALL pipeline parameters must have defaults here. No runtime code should
define fallback values.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from statcan_trends.schemas.base import TrendsBaseModel


# =============================================================================
# Nested Configuration Models
# =============================================================================

class DatasetConfig(TrendsBaseModel):
    """One StatCan table and how to reduce it.

    column_map keys are raw StatCan headers; values are the canonical names
    every other field refers to.
    """
    enabled: bool = True
    title: str = ""
    path: Optional[str] = Field(None, description="File name or path; relative paths resolve under data_dir")
    product_id: Optional[str] = Field(None, description="StatCan PID used when downloading")
    column_map: dict[str, str]
    category_column: str
    summary_pattern: str = Field("total", min_length=1)
    group_columns: list[str]
    date_column: str = "date"
    measure_column: str = "value"
    freq: Literal["year", "quarter"] = "year"
    statistic: Literal["max", "min", "sum", "mean", "median"] = "max"
    descending: bool = True
    scale: float = Field(1.0, gt=0, description="Divide the measure by this for display")
    unit_label: str = ""
    highlight: list[str] = Field(default_factory=list)
    facet_column: Optional[str] = None
    merge_with: Optional[str] = Field(None, description="Monthly dataset appended after this one")
    cutoff_policy: Literal["after_base_max", "fill_gaps"] = "after_base_max"

    @field_validator("statistic", mode="before")
    @classmethod
    def normalize_statistic(cls, v):
        """Normalize statistic names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v


def _default_datasets() -> dict:
    return {
        "grain_exports": DatasetConfig(
            title="Grain exports by destination",
            path="grain_exports.csv",
            column_map={
                "REF_DATE": "date",
                "GEO": "geo",
                "Commodity": "commodity",
                "Destinations": "destination",
                "VALUE": "value",
            },
            category_column="destination",
            group_columns=["commodity", "destination"],
            freq="year",
            scale=1e6,
            unit_label="Million tonnes",
            facet_column="commodity",
        ),
        "soft_drinks_quarterly": DatasetConfig(
            title="Soft drink production",
            path="soft_drinks_quarterly.csv",
            column_map={
                "REF_DATE": "date",
                "GEO": "geo",
                "VALUE": "value",
            },
            category_column="geo",
            group_columns=["geo"],
            freq="quarter",
            scale=1e6,
            unit_label="Million litres",
            merge_with="soft_drinks_monthly",
        ),
        "soft_drinks_monthly": DatasetConfig(
            enabled=False,
            title="Soft drink production (monthly)",
            path="soft_drinks_monthly.csv",
            column_map={
                "REF_DATE": "date",
                "GEO": "geo",
                "VALUE": "value",
            },
            category_column="geo",
            group_columns=["geo"],
            freq="quarter",
            scale=1e6,
            unit_label="Million litres",
        ),
        "greenhouse_flowers": DatasetConfig(
            title="Greenhouse flowers and plants",
            path="greenhouse_flowers.csv",
            column_map={
                "REF_DATE": "date",
                "GEO": "geo",
                "Output": "output",
                "Flowers and plants": "type",
                "VALUE": "value",
            },
            category_column="type",
            group_columns=["geo", "output", "type"],
            freq="year",
            scale=1e6,
            unit_label="Millions",
            facet_column="output",
        ),
    }


class VisualizationConfig(TrendsBaseModel):
    """Chart settings."""
    enabled: bool = True
    dpi: int = Field(150, ge=50)
    figsize: tuple[float, float] = (12.0, 7.0)
    output_format: Literal["png", "pdf", "svg"] = "png"
    facet_columns: int = Field(2, ge=1, description="Facet grid width")
    max_levels: int = Field(8, ge=1, description="Levels drawn per chart, in level order")
    highlight_color: str = "#c0392b"
    muted_color: str = "#b0b0b0"
    linewidth: float = Field(1.5, gt=0)
    bar_chart: bool = True


class OutputConfig(TrendsBaseModel):
    """Processed table output."""
    write_csv: bool = True
    float_format: Optional[str] = None


class LoggingConfig(TrendsBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(TrendsBaseModel):
    """Complete expert configuration with all defaults.

    This is the single source of truth for all pipeline parameters.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    base_dir: str = "statcan_output"
    data_dir: Optional[str] = Field(None, description="Raw table directory; defaults to <base_dir>/raw")
    download: bool = False
    selected_datasets: Optional[list[str]] = None
    datasets: dict[str, DatasetConfig] = Field(default_factory=_default_datasets)
    visualization: VisualizationConfig = Field(default_factory=VisualizationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
