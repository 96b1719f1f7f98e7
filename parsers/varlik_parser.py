"""
Reader for Varlık İşlem Fişi exports.

Loads the first worksheet of an .xlsx file (or a .csv file) and returns
its rows as column name -> text mappings, in sheet order. The header row
supplies the column names; empty cells become "". Blank rows are
kept as records of "" so every sheet row yields one record.

No column checks happen here; the conversion service validates the
dataset as a whole.
"""

import csv
from dataclasses import dataclass, field
from io import BytesIO, StringIO
from pathlib import Path
from typing import BinaryIO, Optional, Union
import structlog

import pandas as pd

from exceptions import SpreadsheetReadError, UnsupportedFileTypeError

logger = structlog.get_logger(__name__)

SUPPORTED_EXTENSIONS = (".xlsx", ".csv")
CSV_DELIMITERS = ",;\t|"
CSV_ENCODINGS = ("utf-8-sig", "cp1254")


@dataclass
class VarlikReadResult:
    """Rows read from one Varlık export."""
    records: list[dict[str, str]] = field(default_factory=list)
    columns: list[str] = field(default_factory=list)
    sheet: Optional[str] = None
    skipped_blank_rows: int = 0

    @property
    def row_count(self) -> int:
        return len(self.records)


def file_extension(filename: str) -> str:
    """Lowercase extension with dot ("Fiş.XLSX" → ".xlsx")."""
    return Path(filename or "").suffix.lower()


def read_varlik_file(
    file: Union[str, Path, bytes, BinaryIO],
    filename: Optional[str] = None,
    skip_blank_rows: bool = False,
) -> VarlikReadResult:
    """
    Read a Varlık İşlem Fişi export.

    Args:
        file: File path, raw bytes or binary file-like object
        filename: Original file name; required for bytes / file objects,
                  taken from the path otherwise
        skip_blank_rows: Drop fully blank rows inside the data as well

    Returns:
        VarlikReadResult with records in sheet order

    Raises:
        UnsupportedFileTypeError: Extension is not .xlsx or .csv
        SpreadsheetReadError: File cannot be parsed or has duplicate headers
    """
    if filename is None and isinstance(file, (str, Path)):
        filename = Path(file).name

    extension = file_extension(filename or "")
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileTypeError(filename or "", SUPPORTED_EXTENSIONS)

    content = _read_bytes(file)

    logger.info(
        "reading_varlik_file",
        filename=filename,
        extension=extension,
        size_bytes=len(content),
    )

    if extension == ".csv":
        df, sheet = _load_csv(content), None
    else:
        df, sheet = _load_first_sheet(content)

    result = _to_records(df, skip_blank_rows)
    result.sheet = sheet

    logger.info(
        "varlik_file_read",
        sheet=sheet,
        rows=result.row_count,
        columns=len(result.columns),
        skipped_blank_rows=result.skipped_blank_rows,
    )

    return result


def _read_bytes(file: Union[str, Path, bytes, BinaryIO]) -> bytes:
    if isinstance(file, bytes):
        return file

    if isinstance(file, (str, Path)):
        try:
            return Path(file).read_bytes()
        except OSError as e:
            logger.error("file_open_failed", path=str(file), error=str(e))
            raise SpreadsheetReadError(
                message="Failed to open file",
                details={"path": str(file), "original_error": str(e)}
            )

    return file.read()


def _load_first_sheet(content: bytes) -> tuple[pd.DataFrame, str]:
    """First worksheet, every cell as text."""
    try:
        with pd.ExcelFile(BytesIO(content), engine="openpyxl") as excel:
            sheet_name = excel.sheet_names[0]
            df = excel.parse(sheet_name, dtype=str, keep_default_na=False)
    except Exception as e:
        logger.error("excel_read_failed", error=str(e))
        raise SpreadsheetReadError(
            message="Failed to read Excel file",
            details={"original_error": str(e)}
        )

    return df, sheet_name


def _load_csv(content: bytes) -> pd.DataFrame:
    """CSV with sniffed delimiter, every cell as text."""
    text = _decode_csv(content)

    try:
        delimiter = csv.Sniffer().sniff(text[:4096], delimiters=CSV_DELIMITERS).delimiter
    except csv.Error:
        delimiter = ","

    try:
        return pd.read_csv(
            StringIO(text),
            sep=delimiter,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
        )
    except Exception as e:
        logger.error("csv_read_failed", error=str(e), delimiter=delimiter)
        raise SpreadsheetReadError(
            message="Failed to read CSV file",
            details={"original_error": str(e), "delimiter": delimiter}
        )


def _decode_csv(content: bytes) -> str:
    """UTF-8 (BOM tolerated), then Windows Turkish (cp1254)."""
    for encoding in CSV_ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            logger.debug("csv_decode_failed", encoding=encoding)

    raise SpreadsheetReadError(
        message="Failed to decode CSV file",
        details={"tried_encodings": list(CSV_ENCODINGS)}
    )


def _to_records(df: pd.DataFrame, skip_blank_rows: bool) -> VarlikReadResult:
    """
    DataFrame → list of dicts, blank cells as "".

    Fully blank rows inside the data stay as records of "" unless
    skip_blank_rows is set. Trailing blank rows are always dropped.
    """
    df = df.fillna("")
    columns = [_normalize_header(col) for col in df.columns]

    duplicates = sorted({col for col in columns if columns.count(col) > 1})
    if duplicates:
        logger.error("duplicate_columns", columns=duplicates)
        raise SpreadsheetReadError(
            message="Duplicate column headers",
            details={"duplicate_columns": duplicates}
        )
    df.columns = columns

    blank = (df.astype(str).apply(lambda col: col.str.strip()) == "").all(axis=1)

    if skip_blank_rows:
        drop = blank
    else:
        # Only the blank run at the end of the sheet
        drop = blank[::-1].astype(int).cummin()[::-1].astype(bool)

    kept = df[~drop]

    return VarlikReadResult(
        records=kept.to_dict(orient="records"),
        columns=columns,
        skipped_blank_rows=int(drop.sum()),
    )


def _normalize_header(col) -> str:
    """Strip surrounding whitespace from a header cell."""
    return str(col).strip()
