"""datasift: map loosely structured contact tables onto a fixed schema.

Pipeline: decode files -> infer column mapping -> normalize fields ->
classify completeness -> deduplicate.
"""

from .config import ConfigurationError, Settings, TargetField, get_settings, load_settings
from .pipeline import BatchResult, process_batch, process_table, process_upload

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "Settings",
    "TargetField",
    "get_settings",
    "load_settings",
    "BatchResult",
    "process_batch",
    "process_table",
    "process_upload",
]
