"""Deduplication of classified records by identity key."""

import logging
from typing import Iterable

from datasift.transform.records import ClassifiedRecord

logger = logging.getLogger(__name__)

KEY_SEPARATOR = "-"


def _key_part(value) -> str:
    return "null" if value is None else str(value)


def identity_key(record: ClassifiedRecord, separator: str = KEY_SEPARATOR) -> str:
    """Composite key of full name, contact and date.

    Missing values appear as "null", so records that are empty in all
    three fields share a key.
    """
    return separator.join(
        _key_part(value) for value in (record.full_name, record.contact, record.date)
    )


def dedupe_records(
    records: Iterable[ClassifiedRecord],
) -> tuple[list[ClassifiedRecord], int]:
    """Drop records whose identity key was already seen.

    Args:
        records: Classified records in input order

    Returns:
        Tuple of (surviving records in original order, removed count)

    Example:
        >>> kept, removed = dedupe_records([first, other, first_again])
        >>> removed
        1
    """
    records = list(records)
    seen: set[str] = set()
    deduped = []

    for record in records:
        key = identity_key(record)
        if key in seen:
            continue
        seen.add(key)
        deduped.append(record)

    duplicate_count = len(records) - len(deduped)
    if duplicate_count > 0:
        logger.info(
            f"Removed {duplicate_count} duplicate records",
            extra={
                "original_count": len(records),
                "deduped_count": len(deduped),
                "duplicate_count": duplicate_count,
            }
        )

    return deduped, duplicate_count
