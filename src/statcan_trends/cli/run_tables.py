"""Core table pipeline execution logic.

This module contains the actual pipeline runner, separated from argument parsing.
Scripts are thin wrappers; this is the real implementation.
"""

import argparse
import json
import logging
import importlib.util
import shutil
from pathlib import Path
from typing import Optional, Dict, Any, List

from statcan_trends.setup_directories import setup_output_directories
from statcan_trends.pipeline import TablePipeline, PipelineResult
from statcan_trends.schemas import resolve_config, ParamConfig, UserConfig, CLIConfig


logger = logging.getLogger(__name__)


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.

    Returns the raw dict before Pydantic validation.

    Parameters
    ----------
    config_path : str
        Path to user config Python file containing CONFIG dict.

    Returns
    -------
    dict
        Raw user configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("config_module", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    # Find CONFIG dict
    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj

    raise ValueError(f"No CONFIG dict found in {path}")


def run_table_pipeline(
    user_config_path: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None,
    rerun: bool = False,
    verbose: bool = False
) -> Dict[str, PipelineResult]:
    """Execute the table pipeline for the configured datasets.

    This is the core pipeline execution function. It:
    1. Loads and resolves configuration (Param < User < CLI)
    2. Optionally cleans the output directory if rerun=True
    3. Sets up output directories
    4. Runs every selected dataset, stopping at the first failure

    Parameters
    ----------
    user_config_path : str, optional
        Path to user config file (Python file with CONFIG dict). If None,
        only expert defaults and CLI overrides apply.

    cli_args : dict, optional
        CLI argument overrides. Keys: datasets, base_dir, download, plots,
        log_level. All optional.

    rerun : bool, optional
        If True, delete processed tables, plots and logs before running.
        Raw downloads are kept.

    verbose : bool, optional
        If True, enable DEBUG logging and print full resolved config.

    Returns
    -------
    dict
        Dataset name -> PipelineResult.

    Raises
    ------
    FileNotFoundError
        If user_config_path or a dataset file does not exist.
    pydantic.ValidationError, ValueError
        If configuration validation fails.

    Examples
    --------
    Run with user config only::

        run_table_pipeline("scripts/user_config.py")

    Run one dataset without charts::

        run_table_pipeline(
            "scripts/user_config.py",
            cli_args={"datasets": ["grain_exports"], "plots": False},
        )
    """
    param_cfg = ParamConfig()

    if user_config_path is not None:
        user_cfg = UserConfig.model_validate(load_user_config_dict(user_config_path))
    else:
        user_cfg = UserConfig()

    cli_args = dict(cli_args or {})
    if verbose and cli_args.get("log_level") is None:
        cli_args["log_level"] = "DEBUG"

    # Filter None values
    cli_dict = {k: v for k, v in cli_args.items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()

    config = resolve_config(param_cfg, user_cfg, cli_cfg)

    if rerun:
        base_dir_path = Path(config.base_dir)
        for sub in ("processed", "plots", "logs"):
            target = base_dir_path / sub
            if target.exists():
                print(f"Cleaning output directory: {target}")
                shutil.rmtree(target)

    output_dirs = setup_output_directories(config.base_dir)

    print(f"\n{'='*60}")
    print("StatCan Trends Table Pipeline")
    print('='*60)
    print(f"Config:   {user_config_path or '(defaults)'}")
    print(f"Datasets: {', '.join(config.selected_datasets)}")
    print(f"Data:     {config.data_dir}")
    print(f"Output:   {config.base_dir}")
    print('='*60)

    if verbose:
        print("\nFull Internal Configuration:")
        print(json.dumps(config.model_dump(), indent=2))
        print('='*60)

    return TablePipeline(config, output_dirs).run()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="statcan-trends",
        description="Partition, roll up and chart StatCan time-series tables",
    )
    parser.add_argument("config", nargs="?", help="Path to user config file")
    parser.add_argument("--dataset", action="append", dest="datasets",
                        help="Dataset to run (repeatable); defaults to all enabled")
    parser.add_argument("--base-dir", help="Output directory")
    parser.add_argument("--download", action="store_true", default=None,
                        help="Download tables from StatCan before loading")
    parser.add_argument("--no-plots", dest="plots", action="store_false", default=None,
                        help="Skip chart rendering")
    parser.add_argument("--rerun", action="store_true",
                        help="Delete processed tables, plots and logs before running")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Logging level (overrides the config file)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    run_table_pipeline(
        args.config,
        cli_args={
            "datasets": args.datasets,
            "base_dir": args.base_dir,
            "download": args.download,
            "plots": args.plots,
            "log_level": args.log_level,
        },
        rerun=args.rerun,
        verbose=args.verbose,
    )
    return 0
