"""PDF decoder for documents listing records as labeled lines.

Expected text looks like::

    Name: Jane Doe | Phone: 555 123 456
    Date: 2024-01-05 | Address: 12 High Street

A record is emitted at the end of the first line by which three of the
four labels have been seen; labels on later lines start a new record.
"""

import io
import logging
from typing import Optional

import pdfplumber

from datasift.decoders.base import BaseDecoder, RawRecord, clean_cell

logger = logging.getLogger(__name__)

# Label -> whether the value stops at "|" (Address runs to end of line)
LABELS = {
    "Date": True,
    "Name": True,
    "Phone": True,
    "Address": False,
}
MIN_LABELS_PER_RECORD = 3


def _label_value(line: str, label: str, pipe_delimited: bool) -> Optional[str]:
    marker = f"{label}:"
    if marker not in line:
        return None
    value = line.split(marker, 1)[1]
    if pipe_delimited:
        value = value.split("|", 1)[0]
    return value.strip()


def segment_labeled_lines(
    text: str,
    min_labels: int = MIN_LABELS_PER_RECORD,
) -> list[RawRecord]:
    """Group labeled lines into records.

    Args:
        text: Extracted document text
        min_labels: Labels needed before a record is emitted

    Returns:
        Records keyed by label name ("Date", "Name", "Phone", "Address")
    """
    records = []
    current: RawRecord = {}

    for line in text.splitlines():
        for label, pipe_delimited in LABELS.items():
            value = _label_value(line, label, pipe_delimited)
            if value is not None:
                current[label] = clean_cell(value)

        if len(current) >= min_labels:
            records.append(current)
            current = {}

    if current:
        logger.debug(
            "Discarding incomplete trailing record",
            extra={"labels": list(current)}
        )

    return records


class PdfDecoder(BaseDecoder):
    """Extracts page text with pdfplumber and segments labeled lines."""

    format_name = "pdf"
    extensions = (".pdf",)

    def _decode(self, content: bytes) -> list[RawRecord]:
        with pdfplumber.open(io.BytesIO(content)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]

        return segment_labeled_lines("\n".join(pages))
