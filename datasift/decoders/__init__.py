"""File decoders producing raw records.

Each decoder handles:
- Parsing one file format into header -> value rows
- Wrapping parser failures in DecodeError
"""

from .base import BaseDecoder, DecodeError
from .csv_decoder import CsvDecoder
from .xlsx_decoder import XlsxDecoder
from .pdf_decoder import PdfDecoder, segment_labeled_lines
from .bundle import expand_bundle, get_decoder, is_bundle

__all__ = [
    "BaseDecoder",
    "DecodeError",
    "CsvDecoder",
    "XlsxDecoder",
    "PdfDecoder",
    "segment_labeled_lines",
    "expand_bundle",
    "get_decoder",
    "is_bundle",
]
