"""Table acquisition: download, load, normalize."""

from statcan_trends.data.loader import TableLoader, load
from statcan_trends.data.normalize import normalize_columns
from statcan_trends.data.downloader import fetch_table, table_url

__all__ = [
    "TableLoader",
    "load",
    "normalize_columns",
    "fetch_table",
    "table_url",
]
