"""
Directory setup for the table pipeline.

Flat layout under one base directory:
- raw/        downloaded StatCan bundles and extracted CSVs
- processed/  detail, summary, rollup and level-order tables
- plots/      charts, one file per dataset and chart type
- logs/       one log file per run
"""

from pathlib import Path
from datetime import datetime, timezone


def setup_output_directories(base_output_dir=None):
    """
    Set up organized output directory structure.

    Parameters
    ----------
    base_output_dir : str or Path, optional
        Base output directory. If None, prompts user for input.

    Returns
    -------
    dict
        Dictionary with paths: 'base', 'raw', 'processed', 'plots', 'logs'
    """

    if base_output_dir is None:
        print("\n" + "=" * 70)
        print("STATCAN TRENDS - OUTPUT DIRECTORY SETUP")
        print("=" * 70)
        print("\nCurrent location: ", Path.cwd())
        print("\nDefault options:")
        print("  1. Current directory: ./statcan_output")
        print("  2. Home directory: ~/statcan_output")
        print("  3. Custom path")

        choice = input("\nSelect option (1/2/3) [default=1]: ").strip() or "1"

        if choice == "2":
            base_output_dir = Path.home() / "statcan_output"
        elif choice == "3":
            path_input = input("Enter custom path (use ~ for home): ").strip()
            base_output_dir = Path(path_input).expanduser()
        else:
            base_output_dir = Path.cwd() / "statcan_output"

    base_output_dir = Path(base_output_dir).expanduser().resolve()

    directories = {
        "base": base_output_dir,
        "raw": base_output_dir / "raw",
        "processed": base_output_dir / "processed",
        "plots": base_output_dir / "plots",
        "logs": base_output_dir / "logs",
    }

    for path in directories.values():
        path.mkdir(parents=True, exist_ok=True)

    print("\nOutput directories created:")
    for key, path in directories.items():
        print(f"  {key:12s}: {path}")
    print("=" * 70 + "\n")

    return directories


def get_processed_path(output_dirs, dataset, table_type, ext="csv"):
    """
    Get processed table path.

    Parameters
    ----------
    output_dirs : dict
        Output directories from setup_output_directories()
    dataset : str
        Dataset name (e.g., 'grain_exports')
    table_type : str
        'detail', 'summary', 'rollup' or 'levels'

    Returns
    -------
    Path
        Full path: processed/<dataset>_<table_type>.<ext>

    Example
    -------
    >>> get_processed_path(dirs, 'grain_exports', 'rollup')
    Path('statcan_output/processed/grain_exports_rollup.csv')
    """
    out_dir = Path(output_dirs["processed"])
    out_dir.mkdir(parents=True, exist_ok=True)
    ext = ext[1:] if ext.startswith('.') else ext
    return out_dir / f"{dataset}_{table_type}.{ext}"


def get_plot_path(output_dirs, dataset, plot_type="series", output_format="png"):
    """
    Get plot file path.

    Returns
    -------
    Path
        Full path: plots/<dataset>_<plot_type>.<output_format>

    Example
    -------
    >>> get_plot_path(dirs, 'greenhouse_flowers', 'levels')
    Path('statcan_output/plots/greenhouse_flowers_levels.png')
    """
    plot_dir = Path(output_dirs["plots"])
    plot_dir.mkdir(parents=True, exist_ok=True)
    return plot_dir / f"{dataset}_{plot_type}.{output_format}"


def get_log_path(output_dirs, timestamp=None):
    """
    Get log file path for one run.

    Parameters
    ----------
    output_dirs : dict
        Output directories from setup_output_directories()
    timestamp : datetime, optional
        Run start time. If None, uses current UTC time.

    Returns
    -------
    Path
        Full path: logs/pipeline_YYYYMMDD_HHMMSS.log
    """
    log_dir = Path(output_dirs["logs"])
    log_dir.mkdir(parents=True, exist_ok=True)

    if timestamp is None:
        timestamp = datetime.now(timezone.utc)

    return log_dir / f"pipeline_{timestamp.strftime('%Y%m%d_%H%M%S')}.log"
