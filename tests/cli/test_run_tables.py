"""Tests for the command-line runner."""

import pytest

from statcan_trends.cli import load_user_config_dict, main, run_table_pipeline
from statcan_trends.cli.run_tables import build_parser

pytestmark = [pytest.mark.unit, pytest.mark.pipeline]


def _write_user_config(path, base_dir, **extra):
    entries = {"BASE_DIR": str(base_dir), **extra}
    body = ",\n".join(f"    {k!r}: {v!r}" for k, v in entries.items())
    path.write_text(f"CONFIG = {{\n{body}\n}}\n")
    return path


def test_load_user_config_dict(temp_dir):
    path = _write_user_config(temp_dir / "cfg.py", temp_dir, LOG_LEVEL="DEBUG")
    assert load_user_config_dict(str(path)) == {"BASE_DIR": str(temp_dir), "LOG_LEVEL": "DEBUG"}


def test_load_user_config_missing_file(temp_dir):
    with pytest.raises(FileNotFoundError):
        load_user_config_dict(str(temp_dir / "absent.py"))


def test_load_user_config_without_config_dict(temp_dir):
    path = temp_dir / "cfg.py"
    path.write_text("SETTINGS = {}\n")
    with pytest.raises(ValueError, match="No CONFIG dict"):
        load_user_config_dict(str(path))


def test_parser_flags():
    args = build_parser().parse_args(
        ["cfg.py", "--dataset", "grain_exports", "--dataset", "greenhouse_flowers", "--no-plots", "-v"]
    )
    assert args.config == "cfg.py"
    assert args.datasets == ["grain_exports", "greenhouse_flowers"]
    assert args.plots is False
    assert args.download is None
    assert args.verbose is True


def test_parser_log_level():
    assert build_parser().parse_args(["--log-level", "WARNING"]).log_level == "WARNING"
    assert build_parser().parse_args([]).log_level is None
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--log-level", "LOUD"])


def test_parser_defaults_leave_config_alone():
    args = build_parser().parse_args([])
    assert args.config is None
    assert args.datasets is None
    assert args.plots is None
    assert args.download is None


def test_run_table_pipeline_selected_dataset(temp_dir, raw_tables, restore_root_logging):
    cfg = _write_user_config(temp_dir / "cfg.py", temp_dir, RUN_DATASETS=["grain_exports"])

    results = run_table_pipeline(str(cfg), cli_args={"plots": False})

    assert list(results) == ["grain_exports"]
    assert (temp_dir / "processed" / "grain_exports_rollup.csv").exists()


def test_cli_dataset_overrides_user_selection(temp_dir, raw_tables, restore_root_logging):
    cfg = _write_user_config(temp_dir / "cfg.py", temp_dir, RUN_DATASETS=["grain_exports"])

    results = run_table_pipeline(str(cfg), cli_args={"datasets": ["greenhouse_flowers"], "plots": False})

    assert list(results) == ["greenhouse_flowers"]


def test_rerun_clears_processed_but_keeps_raw(temp_dir, raw_tables, restore_root_logging):
    cfg = _write_user_config(temp_dir / "cfg.py", temp_dir, RUN_DATASETS=["greenhouse_flowers"])
    stale = temp_dir / "processed" / "stale.csv"
    stale.write_text("x\n")

    run_table_pipeline(str(cfg), cli_args={"plots": False}, rerun=True)

    assert not stale.exists()
    assert (raw_tables / "greenhouse_flowers.csv").exists()


def test_main_returns_zero(temp_dir, raw_tables, restore_root_logging):
    cfg = _write_user_config(temp_dir / "cfg.py", temp_dir)
    assert main([str(cfg), "--dataset", "grain_exports", "--no-plots"]) == 0


def test_log_level_flag_reaches_config(temp_dir, raw_tables, restore_root_logging, monkeypatch):
    seen = {}

    def fake_run(self, names=None):
        seen["level"] = self.config.logging.level
        return {}

    monkeypatch.setattr("statcan_trends.cli.run_tables.TablePipeline.run", fake_run)
    cfg = _write_user_config(temp_dir / "cfg.py", temp_dir)
    assert main([str(cfg), "--log-level", "WARNING"]) == 0
    assert seen["level"] == "WARNING"
