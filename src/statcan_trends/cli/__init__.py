"""Command-line interface modules for statcan_trends.

This package contains core execution logic, making scripts/ optional and deletable.
"""

from statcan_trends.cli.run_tables import run_table_pipeline, load_user_config_dict, main

__all__ = ['run_table_pipeline', 'load_user_config_dict', 'main']
