"""`statcan_trends` - rollups and charts for Statistics Canada time-series tables.

Subpackages:
- data: Download, load, normalize
- transform: Partition, rollup, resample, level ordering
- pipeline: Per-dataset runner
- visualization: Plotting
"""

__version__ = "0.1.0"
