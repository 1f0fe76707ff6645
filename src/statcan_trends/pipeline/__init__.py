"""Pipeline modules.

- runner: Per-dataset load/partition/rollup/plot runner
"""

from statcan_trends.pipeline.runner import TablePipeline, PipelineResult

__all__ = [
    "TablePipeline",
    "PipelineResult",
]
