"""Read StatCan full-table CSV downloads into pandas DataFrames.

Statistics Canada publishes each table as ``<pid>-eng.zip`` containing the
data file ``<pid>.csv`` and a ``<pid>_MetaData.csv`` description. This
module reads either the zip or an extracted CSV. The whole file is read in
one pass and closed before returning.

Key capabilities:
- Reads plain ``.csv`` or the StatCan ``.zip`` bundle
- Tolerates the UTF-8 byte-order mark StatCan writes
- Keeps ``REF_DATE`` as text so ``"1950-01"`` and ``"2007"`` are not coerced
- Checks the header for the columns the caller needs
"""

import logging
import zipfile
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from statcan_trends.contracts import ParseError

__all__ = ['TableLoader', 'load']

logger = logging.getLogger(__name__)

METADATA_SUFFIX = "_MetaData.csv"


class TableLoader:
    """Load a StatCan table from disk.

    Parameters
    ----------
    required_columns : iterable of str, optional
        Raw header names that must be present (e.g. ``REF_DATE``, ``VALUE``).
    encoding : str, default "utf-8-sig"
        Text encoding; the ``-sig`` variant strips a leading BOM.
    text_columns : iterable of str, default ("REF_DATE",)
        Columns read as strings regardless of content.

    Examples
    --------
    >>> loader = TableLoader(required_columns=["REF_DATE", "GEO", "VALUE"])
    >>> df = loader.load("raw/32100008-eng.zip")
    """

    def __init__(self, required_columns: Optional[Iterable[str]] = None,
                 encoding: str = "utf-8-sig",
                 text_columns: Iterable[str] = ("REF_DATE",)):
        self.required_columns = list(required_columns or [])
        self.encoding = encoding
        self.text_columns = list(text_columns)

    def load(self, path) -> pd.DataFrame:
        """Read the table at path.

        Raises
        ------
        FileNotFoundError
            If path does not exist.
        ParseError
            If the file is not parseable CSV, a zip holds no data CSV, or
            required columns are missing from the header.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Table file not found: {path}")

        if path.suffix.lower() == ".zip":
            df = self._read_zip(path)
        else:
            with path.open("rb") as fh:
                df = self._read_csv(fh, path.name)

        self._check_header(df, path)
        logger.info("Loaded %s: %d rows x %d columns", path.name, len(df), len(df.columns))
        return df

    def _read_zip(self, path: Path) -> pd.DataFrame:
        try:
            with zipfile.ZipFile(path) as zf:
                data_name = next(
                    (name for name in zf.namelist()
                     if name.lower().endswith(".csv") and not name.endswith(METADATA_SUFFIX)),
                    None,
                )
                if data_name is None:
                    raise ParseError(f"No data CSV inside {path.name}: {zf.namelist()}")
                logger.debug("Reading %s from %s", data_name, path.name)
                with zf.open(data_name) as fh:
                    return self._read_csv(fh, data_name)
        except zipfile.BadZipFile as e:
            raise ParseError(f"Not a valid zip archive: {path}") from e

    def _read_csv(self, fh, name: str) -> pd.DataFrame:
        dtype = {col: str for col in self.text_columns}
        try:
            return pd.read_csv(fh, encoding=self.encoding, dtype=dtype, low_memory=False)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise ParseError(f"Could not parse {name}: {e}") from e

    def _check_header(self, df: pd.DataFrame, path: Path) -> None:
        missing = [c for c in self.required_columns if c not in df.columns]
        if missing:
            raise ParseError(
                f"Header of {path.name} lacks expected column(s) {missing}; "
                f"found {list(df.columns)}"
            )


def load(path, required_columns: Optional[Iterable[str]] = None) -> pd.DataFrame:
    """Read a StatCan table (convenience wrapper around TableLoader)."""
    return TableLoader(required_columns=required_columns).load(path)
