"""Chart rendering for rolled-up tables."""

from statcan_trends.visualization.plotter import SeriesPlotter

__all__ = ['SeriesPlotter']
