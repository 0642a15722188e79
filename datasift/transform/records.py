"""Record reshaping and completeness classification."""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Any, Callable, Mapping, Optional

from datasift.config import Settings, TargetField, get_settings
from datasift.transform.normalize import (
    normalize_address,
    normalize_contact,
    normalize_date,
    normalize_name,
)

logger = logging.getLogger(__name__)

RawRecord = Mapping[str, Any]
MappedRecord = dict[TargetField, Any]
Normalizer = Callable[[Any], Any]

STATUS_COLUMN = "DATA_STATUS"


class RecordStatus(str, Enum):
    """Completeness of a classified record."""

    VALID = "Valid"
    MISSING_FIELDS = "Missing Fields"


@dataclass(frozen=True)
class ClassifiedRecord:
    """A normalized record with its completeness status."""

    date: Optional[str]
    full_name: Optional[str]
    contact: Optional[str]
    address: Optional[Any]
    status: RecordStatus

    @classmethod
    def from_values(cls, values: Mapping[TargetField, Any]) -> "ClassifiedRecord":
        """Build a record from normalized values, deriving the status."""
        missing = any(values.get(target) is None for target in TargetField)
        return cls(
            date=values.get(TargetField.DATE),
            full_name=values.get(TargetField.FULL_NAME),
            contact=values.get(TargetField.CONTACT),
            address=values.get(TargetField.ADDRESS),
            status=RecordStatus.MISSING_FIELDS if missing else RecordStatus.VALID,
        )

    @property
    def is_valid(self) -> bool:
        return self.status is RecordStatus.VALID

    def get(self, target: TargetField) -> Any:
        """Value of one target field."""
        return {
            TargetField.DATE: self.date,
            TargetField.FULL_NAME: self.full_name,
            TargetField.CONTACT: self.contact,
            TargetField.ADDRESS: self.address,
        }[target]

    def to_dict(self, include_status: bool = True) -> dict:
        """Render with export column names, in export order."""
        data = {target.value: self.get(target) for target in TargetField}
        if include_status:
            data[STATUS_COLUMN] = self.status.value
        return data


def map_record(raw: RawRecord, assignment: Mapping[str, TargetField]) -> MappedRecord:
    """Reshape a raw record to exactly the four target fields.

    Args:
        raw: Raw header -> value mapping
        assignment: Header -> TargetField mapping for the record's table

    Returns:
        Mapping with every TargetField present; unassigned fields are None
    """
    mapped: MappedRecord = {}

    for header, target in assignment.items():
        # Later headers overwrite earlier ones mapped to the same field
        mapped[target] = raw.get(header)

    return {target: mapped.get(target) for target in TargetField}


def build_normalizers(settings: Optional[Settings] = None) -> dict[TargetField, Normalizer]:
    """Normalizer for each target field, configured from settings."""
    settings = settings or get_settings()
    return {
        TargetField.DATE: normalize_date,
        TargetField.FULL_NAME: normalize_name,
        TargetField.CONTACT: partial(normalize_contact, min_digits=settings.min_contact_digits),
        TargetField.ADDRESS: normalize_address,
    }


def classify_record(
    mapped: Mapping[TargetField, Any],
    normalizers: Optional[Mapping[TargetField, Normalizer]] = None,
) -> ClassifiedRecord:
    """Normalize a mapped record and tag its completeness.

    Args:
        mapped: Output of map_record
        normalizers: Per-field normalizers (default: build_normalizers())

    Returns:
        ClassifiedRecord, MISSING_FIELDS if any normalized value is None
    """
    normalizers = normalizers or build_normalizers()

    values = {}
    for target in TargetField:
        normalizer = normalizers.get(target, normalize_address)
        values[target] = normalizer(mapped.get(target))

    return ClassifiedRecord.from_values(values)
