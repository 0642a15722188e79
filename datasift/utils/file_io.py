"""Export of cleaned records to CSV and XLSX."""

import csv
import io
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Union

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from datasift.config import TargetField
from datasift.transform.records import STATUS_COLUMN, ClassifiedRecord

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [target.value for target in TargetField]
SHEET_TITLE = "Cleaned Data"

CSV_CONTENT_TYPE = "text/csv"
XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

Row = Union[ClassifiedRecord, Mapping[str, Any]]


def export_columns(include_status: bool = False) -> list[str]:
    if include_status:
        return EXPORT_COLUMNS + [STATUS_COLUMN]
    return list(EXPORT_COLUMNS)


def _row_values(row: Row, columns: list[str]) -> list[Any]:
    if isinstance(row, ClassifiedRecord):
        row = row.to_dict(include_status=True)
    return [row.get(column) for column in columns]


def to_csv_bytes(rows: Iterable[Row], include_status: bool = False) -> bytes:
    """Serialize rows as CSV with the fixed export columns.

    Args:
        rows: ClassifiedRecords, or dicts keyed by export column name
        include_status: Append the DATA_STATUS column

    Returns:
        UTF-8 encoded CSV; missing values are empty cells
    """
    columns = export_columns(include_status)
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(columns)

    count = 0
    for row in rows:
        writer.writerow(["" if v is None else v for v in _row_values(row, columns)])
        count += 1

    logger.debug(f"Serialized {count} rows to CSV")
    return buffer.getvalue().encode("utf-8")


def _xlsx_value(value: Any) -> Any:
    # Control characters are not allowed in worksheet XML
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def to_xlsx_bytes(rows: Iterable[Row], include_status: bool = False) -> bytes:
    """Serialize rows as a single-sheet XLSX workbook.

    Every string is written as text, so values such as "=1+1" never
    become formulas.
    """
    columns = export_columns(include_status)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SHEET_TITLE
    sheet.append(columns)

    count = 0
    for row in rows:
        sheet.append([_xlsx_value(v) for v in _row_values(row, columns)])
        for cell in sheet[sheet.max_row]:
            if isinstance(cell.value, str):
                cell.data_type = "s"
        count += 1

    buffer = io.BytesIO()
    workbook.save(buffer)

    logger.debug(f"Serialized {count} rows to XLSX")
    return buffer.getvalue()


def _write(data: bytes, output_path: Union[str, Path], row_count: int) -> dict:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(data)

    metadata = {
        "file_path": str(output_path),
        "record_count": row_count,
        "file_size_bytes": output_path.stat().st_size,
    }

    logger.info(
        f"Wrote {row_count} records to {output_path}",
        extra=metadata
    )

    return metadata


def write_csv(
    rows: Iterable[Row],
    output_path: Union[str, Path],
    include_status: bool = False,
) -> dict:
    """Write rows to a CSV file.

    Returns:
        Metadata dict with file info
    """
    rows = list(rows)
    return _write(to_csv_bytes(rows, include_status), output_path, len(rows))


def write_xlsx(
    rows: Iterable[Row],
    output_path: Union[str, Path],
    include_status: bool = False,
) -> dict:
    """Write rows to an XLSX file.

    Returns:
        Metadata dict with file info
    """
    rows = list(rows)
    return _write(to_xlsx_bytes(rows, include_status), output_path, len(rows))


def write_records(
    rows: Iterable[Row],
    output_path: Union[str, Path],
    include_status: bool = False,
) -> dict:
    """Write rows, choosing the format from the file extension.

    Raises:
        ValueError: If the extension is neither .csv nor .xlsx
    """
    suffix = Path(output_path).suffix.lower()
    if suffix == ".csv":
        return write_csv(rows, output_path, include_status)
    if suffix == ".xlsx":
        return write_xlsx(rows, output_path, include_status)
    raise ValueError(f"Unsupported export format: {suffix or output_path}")
