"""Header inference: decide which target field a raw column header names."""

import logging
from difflib import SequenceMatcher
from typing import Any, Iterable, Mapping, Optional, Sequence

from datasift.config import TargetField, get_settings

logger = logging.getLogger(__name__)

Synonyms = Mapping[TargetField, Sequence[str]]


def normalize_header(header: Any) -> str:
    """Lowercase and trim a header for comparison."""
    return str(header).lower().strip()


def similarity_score(a: str, b: str) -> float:
    """Similarity of two strings on a 0-100 scale (100 = identical)."""
    return SequenceMatcher(None, a, b).ratio() * 100


def map_column(
    header: Any,
    synonyms: Optional[Synonyms] = None,
    threshold: Optional[float] = None,
) -> Optional[TargetField]:
    """Map a raw header to a target field.

    An exact synonym match wins outright. Otherwise each field is scored by
    its closest synonym; the best field scoring strictly above the
    threshold wins, ties going to the earlier field in TargetField order.

    Args:
        header: Raw column header
        synonyms: Synonym dictionary (default: configured synonyms)
        threshold: Approximate match threshold (default: configured, 80)

    Returns:
        The matching TargetField, or None
    """
    if header is None:
        return None

    if synonyms is None or threshold is None:
        settings = get_settings()
        synonyms = settings.synonyms if synonyms is None else synonyms
        threshold = settings.match_threshold if threshold is None else threshold

    name = normalize_header(header)
    if not name:
        return None

    for target in TargetField:
        if name in synonyms.get(target, ()):
            return target

    best_match = None
    highest_score = threshold

    for target in TargetField:
        candidates = synonyms.get(target, ())
        if not candidates:
            continue
        score = max(similarity_score(name, synonym) for synonym in candidates)
        if score > highest_score:
            highest_score = score
            best_match = target

    if best_match is not None:
        logger.debug(
            f"Fuzzy matched header '{header}' to {best_match.value}",
            extra={"header": str(header), "target": best_match.value, "score": highest_score}
        )

    return best_match


def assign_headers(
    headers: Iterable[Any],
    synonyms: Optional[Synonyms] = None,
    threshold: Optional[float] = None,
) -> dict[str, TargetField]:
    """Map each distinct header of a table to a target field.

    Unmatched headers are left out. When two headers resolve to the same
    field both are kept; the later one's value wins during record mapping.

    Returns:
        Ordered mapping of header -> TargetField
    """
    assignment: dict[str, TargetField] = {}
    claimed: dict[TargetField, str] = {}

    for header in headers:
        if header in assignment or header is None:
            continue

        target = map_column(header, synonyms=synonyms, threshold=threshold)
        if target is None:
            logger.debug(f"No target field for header '{header}'")
            continue

        if target in claimed:
            logger.warning(
                f"Headers '{claimed[target]}' and '{header}' both map to {target.value}; "
                f"'{header}' takes precedence",
                extra={"target": target.value, "headers": [claimed[target], header]}
            )

        assignment[header] = target
        claimed[target] = header

    logger.info(
        f"Assigned {len(assignment)} headers",
        extra={"assignment": {h: t.value for h, t in assignment.items()}}
    )

    return assignment
