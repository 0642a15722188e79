"""Data transformation modules.

Handles:
- Header-to-schema inference
- Field normalization
- Completeness classification
- Deduplication
"""

from .columns import assign_headers, map_column, similarity_score
from .normalize import (
    normalize_address,
    normalize_contact,
    normalize_date,
    normalize_name,
)
from .records import (
    ClassifiedRecord,
    RecordStatus,
    build_normalizers,
    classify_record,
    map_record,
)
from .dedupe import dedupe_records, identity_key

__all__ = [
    # Column inference
    "map_column",
    "assign_headers",
    "similarity_score",
    # Normalization
    "normalize_date",
    "normalize_name",
    "normalize_contact",
    "normalize_address",
    # Records
    "map_record",
    "classify_record",
    "build_normalizers",
    "ClassifiedRecord",
    "RecordStatus",
    # Deduplication
    "dedupe_records",
    "identity_key",
]
