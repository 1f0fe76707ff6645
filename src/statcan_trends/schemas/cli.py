"""CLIConfig: Command-line operational overrides.

Minimal configuration for operational parameters that commonly change
between runs: which datasets, output path, downloading, plots, verbosity.

This schema handles command-line arguments parsed by argparse.
"""

from typing import Literal, Optional
from pydantic import field_validator
from statcan_trends.schemas.base import TrendsBaseModel


class CLIConfig(TrendsBaseModel):
    """Command-line configuration overrides.

    Operational-only settings that override user and param configs.
    Highest priority in config resolution.

    Usage
    -----
        cli_cfg = CLIConfig(
            datasets=["grain_exports"],
            base_dir="/scratch/statcan",
            plots=False,
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    base_dir: Optional[str] = None
    datasets: Optional[list[str]] = None
    download: Optional[bool] = None
    plots: Optional[bool] = None
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None

    @field_validator("datasets", mode="before")
    @classmethod
    def coerce_datasets(cls, v):
        """Accept a single dataset name; an empty list means no selection."""
        if isinstance(v, str):
            return [v]
        if isinstance(v, (list, tuple)) and not v:
            return None
        return v

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.base_dir is not None:
            overrides["base_dir"] = str(self.base_dir)

        if self.datasets is not None:
            overrides["selected_datasets"] = list(self.datasets)

        if self.download is not None:
            overrides["download"] = self.download

        if self.plots is not None:
            overrides["visualization"] = {"enabled": self.plots}

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
