"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and contains NO optional fields that processing code depends on.

All .get() calls, fallback defaults, and validation logic are FORBIDDEN in
runtime code - everything is explicit here.
"""

from typing import Literal, Optional
from pydantic import ConfigDict
from statcan_trends.schemas.base import TrendsBaseModel


# =============================================================================
# Nested Configuration Models (Runtime)
# =============================================================================

class InternalDatasetConfig(TrendsBaseModel):
    """Runtime dataset configuration."""
    enabled: bool
    title: str
    path: Optional[str]  # Required at runtime unless product_id is set (validated in resolve_config)
    product_id: Optional[str]
    column_map: dict[str, str]
    category_column: str
    summary_pattern: str
    group_columns: list[str]
    date_column: str
    measure_column: str
    freq: Literal["year", "quarter"]
    statistic: Literal["max", "min", "sum", "mean", "median"]
    descending: bool
    scale: float
    unit_label: str
    highlight: list[str]
    facet_column: Optional[str]
    merge_with: Optional[str]
    cutoff_policy: Literal["after_base_max", "fill_gaps"]


class InternalVisualizationConfig(TrendsBaseModel):
    """Runtime visualization settings."""
    enabled: bool
    dpi: int
    figsize: tuple[float, float]
    output_format: Literal["png", "pdf", "svg"]
    facet_columns: int
    max_levels: int
    highlight_color: str
    muted_color: str
    linewidth: float
    bar_chart: bool


class InternalOutputConfig(TrendsBaseModel):
    """Runtime output configuration."""
    write_csv: bool
    float_format: Optional[str]


class InternalLoggingConfig(TrendsBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


# =============================================================================
# Main InternalConfig
# =============================================================================

class InternalConfig(TrendsBaseModel):
    """Authoritative runtime configuration.

    This is the ONLY configuration schema that processing code sees.
    It is fully validated, immutable, and contains explicit values for
    all parameters.

    Usage
    -----
    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.dpi = config.visualization.dpi  # NOT .get()
            dataset = config.datasets["grain_exports"]

    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO validation

    All of that happens during config resolution, not in runtime code.
    """

    base_dir: str
    data_dir: str
    download: bool
    selected_datasets: list[str]
    datasets: dict[str, InternalDatasetConfig]
    visualization: InternalVisualizationConfig
    output: InternalOutputConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
