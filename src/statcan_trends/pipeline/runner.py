"""Per-dataset table pipeline.

Runs each configured StatCan table through load, normalize, optional
monthly splice, period parsing, summary/detail partition, rollup and level
ordering, then writes the processed tables and charts.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd

from statcan_trends.contracts import assert_keys_present
from statcan_trends.data import TableLoader, normalize_columns, fetch_table, table_url
from statcan_trends.schemas import InternalConfig, InternalDatasetConfig
from statcan_trends.setup_directories import get_log_path, get_plot_path, get_processed_path
from statcan_trends.transform import (
    add_period_columns,
    append_after,
    contains_ci,
    partition,
    reorder_levels,
    rollup,
    upsample_to_quarter,
)
from statcan_trends.visualization import SeriesPlotter

__all__ = ['PipelineResult', 'TablePipeline']

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Tables produced for one dataset, plus the files written for it."""
    name: str
    detail: pd.DataFrame
    summary: pd.DataFrame
    rollup: pd.DataFrame
    levels: List
    outputs: Dict[str, Path] = field(default_factory=dict)


class TablePipeline:
    """Runs configured datasets one after another.

    **Stages (per dataset):**

    1. **Load**: read the CSV or StatCan zip bundle, downloading it first
       when ``download`` is enabled and the dataset has a ``product_id``.
    2. **Normalize**: keep and rename the ``column_map`` columns; the
       measure must be numeric.
    3. **Merge** (optional): when ``merge_with`` names a monthly dataset,
       both series are summed to quarters per group key and the monthly
       quarters after the end of this series are appended.
    4. **Periods**: parse every reference date; a malformed one stops
       the run.
    5. **Partition**: rows whose category contains ``summary_pattern``
       (case-insensitive) become the summary table; the rest are detail.
    6. **Rollup**: sum detail rows per (group columns..., period).
    7. **Order**: rank category levels by the configured statistic.
    8. **Write** processed CSVs and **plot** charts.

    Every stage failure is fatal: ``run()`` stops at the first dataset
    that raises.

    Example usage::

        config = resolve_config(ParamConfig(), user_cfg, cli_cfg)
        output_dirs = setup_output_directories(config.base_dir)
        results = TablePipeline(config, output_dirs).run()
        results["grain_exports"].levels[:3]
    """

    def __init__(self, config: InternalConfig, output_dirs: dict):
        """Initialize pipeline.

        Parameters
        ----------
        config : InternalConfig
            Fully validated runtime configuration.
        output_dirs : dict
            Paths from setup_output_directories(): raw, processed,
            plots, logs.
        """
        self.config = config
        self.output_dirs = output_dirs
        self.plotter = SeriesPlotter(config) if config.visualization.enabled else None

    def _setup_logging(self) -> Path:
        """Configure the root logger with file and console handlers.

        Returns the log file path.
        """
        log_level = getattr(logging, self.config.logging.level, logging.INFO)
        log_path = get_log_path(self.output_dirs)

        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        # Clear existing handlers and add new ones
        root = logging.getLogger()
        root.setLevel(log_level)
        for handler in root.handlers[:]:
            root.removeHandler(handler)

        fh = logging.FileHandler(log_path)
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)

        ch = logging.StreamHandler()
        ch.setLevel(log_level)
        ch.setFormatter(formatter)
        root.addHandler(ch)

        logger.info("Logging: level=%s, file=%s", self.config.logging.level, log_path)
        return log_path

    def _resolve_path(self, ds: InternalDatasetConfig) -> Path:
        """Local file for a dataset, downloading it when configured to."""
        data_dir = Path(self.config.data_dir)

        if self.config.download and ds.product_id is not None:
            return fetch_table(ds.product_id, data_dir)

        if ds.path is None:
            return data_dir / table_url(ds.product_id).rsplit("/", 1)[-1]

        path = Path(ds.path).expanduser()
        return path if path.is_absolute() else data_dir / path

    def _load(self, name: str) -> pd.DataFrame:
        """Load and normalize one dataset."""
        ds = self.config.datasets[name]
        path = self._resolve_path(ds)
        raw = TableLoader(required_columns=list(ds.column_map)).load(path)
        return normalize_columns(raw, ds.column_map, numeric_columns=[ds.measure_column])

    def _merge_monthly(self, base: pd.DataFrame, monthly: pd.DataFrame,
                       ds: InternalDatasetConfig) -> pd.DataFrame:
        """Splice a monthly continuation onto a quarterly series, per group key."""
        keys = list(ds.group_columns)
        date, measure = ds.date_column, ds.measure_column
        assert_keys_present(base, keys, stage="Merge")
        assert_keys_present(monthly, keys, stage="Merge")

        base_groups = {k: g for k, g in base.groupby(keys, sort=False)}
        new_groups = {k: g for k, g in monthly.groupby(keys, sort=False)}

        pieces = []
        for key in sorted(set(base_groups) | set(new_groups)):
            base_q = base_groups.get(key, base.iloc[0:0])
            base_q = upsample_to_quarter(base_q, date, measure)
            if key in new_groups:
                new_q = upsample_to_quarter(new_groups[key], date, measure)
                merged = append_after(base_q, new_q, date, ds.cutoff_policy)
            else:
                merged = base_q
            for col, value in zip(keys, key):
                merged[col] = value
            pieces.append(merged)

        out = pd.concat(pieces, ignore_index=True)
        out[date] = out[date].dt.strftime("%Y-%m")
        logger.info("Merged %s: %d quarterly rows across %d series",
                    ds.merge_with, len(out), len(pieces))
        return out[keys + [date, measure]]

    def _write_outputs(self, result: PipelineResult, ds: InternalDatasetConfig) -> None:
        """Write processed tables as CSV."""
        float_format = self.config.output.float_format
        levels_df = pd.DataFrame({
            "rank": range(1, len(result.levels) + 1),
            ds.category_column: result.levels,
        })
        tables = {
            "detail": result.detail,
            "summary": result.summary,
            "rollup": result.rollup,
            "levels": levels_df,
        }
        for table_type, df in tables.items():
            path = get_processed_path(self.output_dirs, result.name, table_type)
            df.to_csv(path, index=False, float_format=float_format)
            result.outputs[table_type] = path
        logger.debug("Wrote %d tables for '%s'", len(tables), result.name)

    def _plot(self, result: PipelineResult, ds: InternalDatasetConfig) -> None:
        viz = self.config.visualization
        series_path = get_plot_path(self.output_dirs, result.name, "series", viz.output_format)
        result.outputs["series_plot"] = Path(
            self.plotter.plot_series(result.rollup, ds, result.levels, series_path)
        )
        if viz.bar_chart:
            levels_path = get_plot_path(self.output_dirs, result.name, "levels", viz.output_format)
            result.outputs["levels_plot"] = Path(
                self.plotter.plot_levels(result.rollup, ds, result.levels, levels_path)
            )

    def run_dataset(self, name: str) -> PipelineResult:
        """Run every stage for one dataset.

        Raises
        ------
        KeyError
            If name is not a configured dataset.
        FileNotFoundError, ParseError, SchemaError, OverlapError
            From the failing stage; nothing is written for the dataset
            past that stage.
        """
        if name not in self.config.datasets:
            raise KeyError(f"Unknown dataset '{name}'")
        ds = self.config.datasets[name]

        logger.info("=" * 60)
        logger.info("Dataset: %s (%s)", name, ds.title or name)
        logger.info("=" * 60)

        table = self._load(name)
        if ds.merge_with is not None:
            table = self._merge_monthly(table, self._load(ds.merge_with), ds)

        table = add_period_columns(table, ds.date_column)
        summary, detail = partition(table, ds.category_column, contains_ci(ds.summary_pattern))

        rolled = rollup(detail, ds.group_columns, ds.date_column, ds.measure_column, freq=ds.freq)
        levels = reorder_levels(
            rolled, ds.category_column, ds.measure_column,
            statistic=ds.statistic, descending=ds.descending,
        ).levels

        result = PipelineResult(name=name, detail=detail, summary=summary,
                                rollup=rolled, levels=levels)

        if self.config.output.write_csv:
            self._write_outputs(result, ds)
        if self.plotter is not None:
            self._plot(result, ds)

        logger.info("Dataset %s done: %d detail, %d summary, %d rollup rows, %d levels",
                    name, len(detail), len(summary), len(rolled), len(levels))
        return result

    def run(self, names: Optional[Iterable[str]] = None) -> Dict[str, PipelineResult]:
        """Set up logging and run the selected datasets in order.

        Parameters
        ----------
        names : iterable of str, optional
            Datasets to run. Defaults to ``config.selected_datasets``.

        Returns
        -------
        dict
            Dataset name -> PipelineResult, in run order.
        """
        self._setup_logging()
        names = list(names) if names is not None else list(self.config.selected_datasets)

        logger.info("Starting table pipeline: %s", ", ".join(names) or "(no datasets)")

        results = {}
        for name in names:
            try:
                results[name] = self.run_dataset(name)
            except Exception:
                logger.exception("Dataset '%s' failed; stopping", name)
                raise

        logger.info("Pipeline complete: %d dataset(s)", len(results))
        return results
