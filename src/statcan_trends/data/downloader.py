"""Download StatCan full-table CSV bundles.

Full-table bulk download needs no authentication. The product id (PID) is
the table number without dashes or the trailing ``-01`` view suffix:
table 32-10-0008-01 is PID ``32100008``.
"""

import logging
import re
from pathlib import Path
from typing import Optional

import requests

__all__ = ['STATCAN_BASE', 'table_url', 'fetch_table']

logger = logging.getLogger(__name__)

STATCAN_BASE = "https://www150.statcan.gc.ca/n1/tbl/csv"

_PID_RE = re.compile(r"[0-9]{8}")


def table_url(product_id: str) -> str:
    """Full-table English CSV bundle URL for a PID."""
    pid = product_id.replace("-", "")[:8]
    if not _PID_RE.fullmatch(pid):
        raise ValueError(f"Not a StatCan product id: {product_id!r}")
    return f"{STATCAN_BASE}/{pid}-eng.zip"


def fetch_table(product_id: str, dest_dir, overwrite: bool = False,
                timeout: int = 180,
                session: Optional[requests.Session] = None) -> Path:
    """Download a table bundle into dest_dir and return its path.

    An existing file is reused unless overwrite is True.

    Raises
    ------
    requests.HTTPError
        If StatCan answers with an error status.
    """
    url = table_url(product_id)
    dest_dir = Path(dest_dir)
    dest_dir.mkdir(parents=True, exist_ok=True)
    target = dest_dir / url.rsplit("/", 1)[-1]

    if target.exists() and not overwrite:
        logger.info("Using cached %s", target)
        return target

    logger.info("Downloading %s", url)
    http = session or requests
    resp = http.get(url, timeout=timeout)
    resp.raise_for_status()

    tmp = target.with_suffix(".part")
    tmp.write_bytes(resp.content)
    tmp.replace(target)

    logger.info("Saved %s (%d bytes)", target, len(resp.content))
    return target
