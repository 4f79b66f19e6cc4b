# backend/utils/spreadsheet.py
import logging
from pathlib import Path
from typing import Iterable, List

import pandas as pd

from utils.errors import InvalidInput

logger = logging.getLogger(__name__)

SPREADSHEET_EXTENSIONS = {".xlsx", ".xls", ".csv"}
SPREADSHEET_MIME_MARKERS = ("spreadsheet", "excel", "vnd.ms-excel", "text/csv")


def is_spreadsheet(filename: str, content_type: str) -> bool:
    """Accept the file when either its extension or its MIME type looks like a sheet."""
    ext = Path(filename or "").suffix.lower()
    mime = (content_type or "").lower()
    return ext in SPREADSHEET_EXTENSIONS or any(m in mime for m in SPREADSHEET_MIME_MARKERS)


def _first_column_names(cells: Iterable) -> List[str]:
    # Only non-blank text cells count; numbers, dates and empty cells are skipped
    names = []
    for cell in cells:
        if isinstance(cell, str) and cell.strip():
            names.append(cell.strip())
    return names


def _read_csv_first_column(path: Path) -> List:
    text = path.read_text(encoding="utf-8-sig")
    return [line.split(",")[0] for line in text.splitlines() if line.strip()]


def _read_workbook_first_column(path: Path) -> List:
    frame = pd.read_excel(path, sheet_name=0, header=None, dtype=object)
    if frame.empty:
        return []
    return frame.iloc[:, 0].tolist()


def read_product_names(path: Path) -> List[str]:
    """
    Read candidate product names from the first column of every row.

    CSV files are split on commas line by line; .xlsx/.xls files are parsed as
    workbooks and only the first sheet is read. There is no header handling:
    a title cell in the first row is read as a name like any other.
    """
    try:
        if path.suffix.lower() == ".csv":
            cells = _read_csv_first_column(path)
        else:
            cells = _read_workbook_first_column(path)
    except Exception as e:
        logger.warning("Could not parse spreadsheet %s: %s", path.name, e)
        raise InvalidInput("Could not read the spreadsheet file")

    return _first_column_names(cells)
