"""Utility modules for the pipeline.

Includes:
- Logging configuration
- Structured pipeline logging
- CSV/XLSX export
"""

from .logging_config import setup_logging
from .file_io import to_csv_bytes, to_xlsx_bytes, write_csv, write_xlsx, write_records
from .pipeline_logger import PipelineLogger, timed_operation

__all__ = [
    "setup_logging",
    "to_csv_bytes",
    "to_xlsx_bytes",
    "write_csv",
    "write_xlsx",
    "write_records",
    "PipelineLogger",
    "timed_operation",
]
