"""
Text utilities for spreadsheet cell values.

Cells arrive as text, numbers or empty markers (None, NaN, pd.NA)
depending on the reader. Everything the converter copies into the
catalog goes through cell_to_text first.
"""

from typing import Any

import pandas as pd


def cell_to_text(value: Any, default: str = "") -> str:
    """
    Coerce a spreadsheet cell to text.

    - None / NaN / pd.NA / "" → default
    - 9786050837933.0 → "9786050837933" (integral floats lose the ".0")
    - 12.5 → "12.5"
    - strings are returned unchanged (no trimming)

    Args:
        value: Raw cell value
        default: Text returned for empty cells

    Returns:
        Text representation of the cell
    """
    if isinstance(value, str):
        return value if value != "" else default

    if value is None or (pd.api.types.is_scalar(value) and pd.isna(value)):
        return default

    if isinstance(value, bool):
        return str(value).upper()

    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return str(value)

    return str(value)
