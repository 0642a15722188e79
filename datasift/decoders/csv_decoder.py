"""Delimited text decoder."""

import csv
import io
import logging

from datasift.decoders.base import BaseDecoder, RawRecord, clean_cell

logger = logging.getLogger(__name__)


class CsvDecoder(BaseDecoder):
    """Comma-separated files with a header row, UTF-8 encoded."""

    format_name = "csv"
    extensions = (".csv",)

    def __init__(self, encoding: str = "utf-8-sig", delimiter: str = ","):
        self.encoding = encoding
        self.delimiter = delimiter

    def _decode(self, content: bytes) -> list[RawRecord]:
        text = content.decode(self.encoding)
        reader = csv.DictReader(io.StringIO(text), delimiter=self.delimiter)

        if reader.fieldnames is None:
            return []

        headers = [h.strip() if h else h for h in reader.fieldnames]
        reader.fieldnames = headers

        records = []
        for row in reader:
            # Cells beyond the header row land under the None key
            records.append({
                header: clean_cell(value)
                for header, value in row.items()
                if header
            })

        return records
