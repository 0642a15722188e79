"""Spreadsheet decoder (first worksheet of an .xlsx workbook)."""

import io
import logging

from openpyxl import load_workbook

from datasift.decoders.base import BaseDecoder, RawRecord, clean_cell

logger = logging.getLogger(__name__)


class XlsxDecoder(BaseDecoder):
    """Reads the first worksheet; the first non-empty row is the header."""

    format_name = "xlsx"
    extensions = (".xlsx",)

    def _decode(self, content: bytes) -> list[RawRecord]:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)

        try:
            if len(workbook.sheetnames) > 1:
                logger.debug(
                    f"Ignoring {len(workbook.sheetnames) - 1} additional worksheets",
                    extra={"sheets": workbook.sheetnames}
                )

            sheet = workbook.worksheets[0]
            headers = None
            records = []

            for row in sheet.iter_rows(values_only=True):
                cells = [clean_cell(value) for value in row]
                if all(cell is None for cell in cells):
                    continue

                if headers is None:
                    headers = [None if cell is None else str(cell) for cell in cells]
                    continue

                records.append({
                    header: cells[i] if i < len(cells) else None
                    for i, header in enumerate(headers)
                    if header is not None
                })
        finally:
            workbook.close()

        return records
