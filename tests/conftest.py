"""Root-level pytest fixtures for the statcan_trends test suite.

Provides shared configuration fixtures following the Pydantic-based
architecture, plus small StatCan-shaped tables written to disk.
All tests must use these fixtures instead of creating raw dict configs.
"""

import pytest
from pathlib import Path
import tempfile
import shutil

from statcan_trends.schemas import ParamConfig, UserConfig, resolve_config

from tests.helpers.statcan_frames import (
    grain_raw_frame,
    greenhouse_raw_frame,
    soft_drinks_quarterly_raw_frame,
    soft_drinks_monthly_raw_frame,
    write_csv,
)


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults, including dataset presets."""
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides)."""
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_scale(make_config):
    ...     config = make_config(DATASETS={"grain_exports": {"scale": 1000}})
    ...     assert config.datasets["grain_exports"].scale == 1000.0
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        else:
            return resolve_config(param_config, None, None)

    return _make


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory that is cleaned up after test."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def output_dirs(temp_dir):
    """Standard output directory structure.

    Returns dict with keys: base, raw, processed, plots, logs
    All directories are created and cleaned up automatically.
    """
    dirs = {
        "base": temp_dir,
        "raw": temp_dir / "raw",
        "processed": temp_dir / "processed",
        "plots": temp_dir / "plots",
        "logs": temp_dir / "logs",
    }

    for d in dirs.values():
        d.mkdir(parents=True, exist_ok=True)

    return dirs


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def raw_tables(output_dirs):
    """Every preset's raw CSV written under raw/ with its preset file name."""
    frames = {
        "grain_exports.csv": grain_raw_frame(),
        "soft_drinks_quarterly.csv": soft_drinks_quarterly_raw_frame(),
        "soft_drinks_monthly.csv": soft_drinks_monthly_raw_frame(),
        "greenhouse_flowers.csv": greenhouse_raw_frame(),
    }
    for name, df in frames.items():
        write_csv(df, output_dirs["raw"] / name)
    return output_dirs["raw"]


@pytest.fixture
def restore_root_logging():
    """Put back the root logger's handlers after a test that configures logging."""
    import logging
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
