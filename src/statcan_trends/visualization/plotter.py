"""Time-series and level-ranking charts for rolled-up StatCan tables.

Renders faceted line charts and ranked bar charts to image files with the
headless Agg backend.
"""

import logging
import math
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from statcan_trends.contracts import assert_columns
from statcan_trends.schemas import InternalConfig, InternalDatasetConfig

__all__ = ['SeriesPlotter']

logger = logging.getLogger(__name__)


class SeriesPlotter:
    """Generates trend and ranking charts from rollup tables.

    **Series chart:**

    One line per category level, plotted against the period (year, or
    fractional year for quarterly rollups). When the dataset names a
    facet column, one panel is drawn per facet value, laid out on a grid
    ``facet_columns`` wide. Only the first ``max_levels`` levels of the
    level order are drawn. Highlighted levels use ``highlight_color``;
    the rest are drawn thin in ``muted_color`` so the highlighted series
    stand out against the context of the others.

    **Level chart:**

    Horizontal bars of the ranking statistic per level, top-ranked level
    at the top.

    **Scaling:**

    Measures are divided by the dataset's ``scale`` (e.g. ``1e6``) and the
    y axis is labelled with ``unit_label``. Row data is never modified.

    Example usage::

        plotter = SeriesPlotter(config)
        plotter.plot_series(rollup_df, config.datasets["grain_exports"],
                            levels, "plots/grain_exports_series.png")
    """

    def __init__(self, config: InternalConfig):
        """Initialize plotter.

        Parameters
        ----------
        config : InternalConfig
            Fully validated runtime configuration; only the visualization
            section is read.
        """
        self.config = config
        viz = config.visualization

        self.dpi = viz.dpi
        self.figsize = tuple(viz.figsize)
        self.output_format = viz.output_format
        self.facet_columns = viz.facet_columns
        self.max_levels = viz.max_levels
        self.highlight_color = viz.highlight_color
        self.muted_color = viz.muted_color
        self.linewidth = viz.linewidth

        logger.info("SeriesPlotter initialized (format=%s, dpi=%d)", self.output_format, self.dpi)

    @staticmethod
    def _period_axis(df: pd.DataFrame) -> pd.Series:
        """Year, or year plus quarter offset, as a float x coordinate."""
        x = df["year"].astype(float)
        if "quarter" in df.columns:
            x = x + (df["quarter"].astype(float) - 1.0) / 4.0
        return x

    def _highlighted(self, ds: InternalDatasetConfig, levels: Sequence) -> List:
        """Levels drawn in the highlight color; defaults to the top level."""
        if ds.highlight:
            return [lvl for lvl in levels if lvl in set(ds.highlight)]
        return list(levels[:1])

    def _setup_figure(self, n_panels: int) -> Tuple[plt.Figure, np.ndarray]:
        """Create a grid with at least n_panels axes."""
        ncols = min(self.facet_columns, max(n_panels, 1))
        nrows = max(1, math.ceil(n_panels / ncols))
        fig, axes = plt.subplots(
            nrows, ncols,
            figsize=self.figsize,
            dpi=self.dpi,
            squeeze=False,
            sharex=True,
        )
        return fig, axes.ravel()

    def _draw_panel(self, ax: plt.Axes, df: pd.DataFrame, ds: InternalDatasetConfig,
                    levels: Sequence, highlighted: Sequence) -> None:
        """Draw one line per level present in df."""
        category = ds.category_column
        measure = ds.measure_column

        work = df.assign(_x=self._period_axis(df))
        series = work.groupby([category, "_x"], sort=True, observed=True)[measure].sum()
        present = set(series.index.get_level_values(0))

        # Muted first so highlighted lines are drawn on top.
        ordered = [lvl for lvl in levels if lvl not in highlighted] + list(highlighted)
        for level in ordered:
            if level not in present:
                continue
            values = series.loc[level] / ds.scale
            is_hl = level in highlighted
            ax.plot(
                values.index,
                values.to_numpy(),
                color=self.highlight_color if is_hl else self.muted_color,
                linewidth=self.linewidth * (1.6 if is_hl else 0.8),
                alpha=1.0 if is_hl else 0.7,
                label=str(level) if is_hl else None,
                zorder=3 if is_hl else 2,
            )

        ax.grid(True, alpha=0.2, linestyle=':', linewidth=0.5)
        ax.set_ylabel(ds.unit_label or measure, fontsize=10)
        if highlighted:
            ax.legend(loc='upper left', fontsize=9, framealpha=0.9)

    def _save_figure(self, fig: plt.Figure, output_path: Path) -> str:
        """Save figure in configured format."""
        output_path.parent.mkdir(parents=True, exist_ok=True)

        output_file = output_path.with_suffix(f'.{self.output_format}')

        fig.savefig(
            output_file,
            dpi=self.dpi,
            bbox_inches='tight',
            format=self.output_format
        )

        plt.close(fig)
        logger.info("Plot saved: %s", output_file)

        return str(output_file)

    def plot_series(
        self,
        rollup_df: pd.DataFrame,
        ds: InternalDatasetConfig,
        levels: Sequence,
        output_path: Path,
    ) -> str:
        """Plot measure over period, one line per level, optionally faceted.

        Parameters
        ----------
        rollup_df : pd.DataFrame
            Output of rollup(): group columns, ``year`` (and ``quarter``),
            and the measure.
        ds : InternalDatasetConfig
            Dataset settings (category, facet, scale, highlight, title).
        levels : sequence
            Level order from reorder_levels(); truncated to max_levels.
        output_path : Path
            Target file; the suffix is replaced by the configured format.

        Returns
        -------
        str
            Path to the saved file.
        """
        assert_columns(rollup_df, [ds.category_column, ds.measure_column, "year"], stage="Plot")

        levels = list(levels)[:self.max_levels]
        highlighted = self._highlighted(ds, levels)
        shown = rollup_df[rollup_df[ds.category_column].isin(levels)]

        if ds.facet_column is not None:
            facets = list(pd.unique(shown[ds.facet_column]))
        else:
            facets = [None]

        fig, axes = self._setup_figure(len(facets))

        for ax, facet in zip(axes, facets):
            panel = shown if facet is None else shown[shown[ds.facet_column] == facet]
            self._draw_panel(ax, panel, ds, levels, highlighted)
            if facet is not None:
                ax.set_title(str(facet), fontsize=11, fontweight='bold')

        for ax in axes[len(facets):]:
            ax.set_visible(False)

        fig.suptitle(ds.title, fontsize=13, fontweight='bold')
        axes[-1].set_xlabel('Year', fontsize=10)
        fig.tight_layout()

        logger.debug("Series plot: %d panel(s), %d level(s)", len(facets), len(levels))
        return self._save_figure(fig, Path(output_path))

    def plot_levels(
        self,
        rollup_df: pd.DataFrame,
        ds: InternalDatasetConfig,
        levels: Sequence,
        output_path: Path,
        statistic: Optional[str] = None,
    ) -> str:
        """Horizontal bar chart of the ranking statistic, in level order.

        Parameters
        ----------
        statistic : str, optional
            Pandas aggregation name; defaults to the dataset's statistic.

        Returns
        -------
        str
            Path to the saved file.
        """
        assert_columns(rollup_df, [ds.category_column, ds.measure_column], stage="Plot")

        how = statistic or ds.statistic
        levels = list(levels)[:self.max_levels]
        stats = (
            rollup_df.groupby(ds.category_column, observed=True)[ds.measure_column]
            .agg(how)
            .reindex(levels)
            / ds.scale
        )
        highlighted = set(self._highlighted(ds, levels))

        fig, axes = self._setup_figure(1)
        ax = axes[0]
        positions = np.arange(len(levels))[::-1]
        ax.barh(
            positions,
            stats.to_numpy(),
            color=[self.highlight_color if lvl in highlighted else self.muted_color
                   for lvl in levels],
        )
        ax.set_yticks(positions)
        ax.set_yticklabels([str(lvl) for lvl in levels], fontsize=9)
        ax.set_xlabel(f"{how} ({ds.unit_label or ds.measure_column})", fontsize=10)
        ax.grid(True, axis='x', alpha=0.2, linestyle=':', linewidth=0.5)
        ax.set_title(ds.title, fontsize=12, fontweight='bold')
        fig.tight_layout()

        return self._save_figure(fig, Path(output_path))
