"""StatCan Trends User Configuration.

This is the user-facing configuration file. Modify settings here to customize
the pipeline behavior. Dataset presets and advanced settings are in
src/statcan_trends/schemas/param.py

Usage:
    python scripts/run_statcan_pipeline.py scripts/user_config.py
    python scripts/run_statcan_pipeline.py scripts/user_config.py --dataset greenhouse_flowers
"""

CONFIG = {
    # ========================================================================
    # LOCATIONS
    # ========================================================================
    "BASE_DIR": "./statcan_output",   # processed/, plots/, logs/ go here
    "DATA_DIR": None,                 # raw tables; None = <BASE_DIR>/raw
    "DOWNLOAD": False,                # fetch full-table zips from StatCan
    "LOG_LEVEL": "INFO",

    # ========================================================================
    # DATASETS
    # ========================================================================
    "RUN_DATASETS": None,             # None = every enabled preset

    # Partial overrides of the presets, keyed by dataset name.
    "DATASETS": {
        "grain_exports": {
            "product_id": "32100008",
            "highlight": ["United States", "Japan", "China"],
        },
        "greenhouse_flowers": {
            "highlight": ["Poinsettias"],
        },
    },

    # ========================================================================
    # CHARTS
    # ========================================================================
    "visualization": {
        "dpi": 150,
        "facet_columns": 2,
        "max_levels": 8,
    },
}
