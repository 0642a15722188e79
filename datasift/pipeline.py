"""Pipeline orchestration: decode -> map -> classify -> dedupe."""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping, Optional, Sequence

from datasift.config import Settings, get_settings
from datasift.decoders import DecodeError, expand_bundle, get_decoder, is_bundle
from datasift.transform.columns import assign_headers
from datasift.transform.dedupe import dedupe_records
from datasift.transform.records import (
    ClassifiedRecord,
    build_normalizers,
    classify_record,
    map_record,
)
from datasift.utils.pipeline_logger import PipelineLogger, timed_operation

logger = logging.getLogger(__name__)

RawRecord = Mapping[str, Any]
Table = Sequence[RawRecord]


@dataclass
class BatchResult:
    """Outcome of processing one upload."""

    record_count: int = 0
    dedup_count: int = 0
    files_processed: int = 0
    data: list[ClassifiedRecord] = field(default_factory=list)

    @property
    def missing_fields_count(self) -> int:
        return sum(1 for record in self.data if not record.is_valid)

    def to_dict(self) -> dict:
        """Response payload for the transport layer."""
        return {
            "success": True,
            "filesProcessed": self.files_processed,
            "recordCount": self.record_count,
            "dedupCount": self.dedup_count,
            "data": [record.to_dict() for record in self.data],
        }


def table_headers(rows: Iterable[RawRecord]) -> list[str]:
    """Distinct headers of a table in first-appearance order."""
    headers: dict[str, None] = {}
    for row in rows:
        for header in row:
            headers.setdefault(header, None)
    return list(headers)


def process_table(
    rows: Table,
    settings: Optional[Settings] = None,
) -> list[ClassifiedRecord]:
    """Map and classify every row of one table.

    Headers are assigned once for the whole table.

    Args:
        rows: Raw records of a single source table
        settings: Settings (default: process-wide settings)

    Returns:
        Classified records in row order
    """
    settings = settings or get_settings()

    assignment = assign_headers(
        table_headers(rows),
        synonyms=settings.synonyms,
        threshold=settings.match_threshold,
    )
    normalizers = build_normalizers(settings)

    return [classify_record(map_record(row, assignment), normalizers) for row in rows]


def process_batch(
    tables: Iterable[Table],
    settings: Optional[Settings] = None,
    pipeline_logger: Optional[PipelineLogger] = None,
) -> BatchResult:
    """Process decoded tables and deduplicate across all of them.

    Args:
        tables: Decoded tables, one per source file
        settings: Settings (default: process-wide settings)
        pipeline_logger: Optional structured logger for the batch

    Returns:
        BatchResult with the deduplicated records
    """
    settings = settings or get_settings()

    classified: list[ClassifiedRecord] = []
    files_processed = 0

    with timed_operation("transform", logger) as timer:
        for rows in tables:
            classified.extend(process_table(rows, settings))
            files_processed += 1

        deduped, dedup_count = dedupe_records(classified)

    result = BatchResult(
        record_count=len(deduped),
        dedup_count=dedup_count,
        files_processed=files_processed,
        data=deduped,
    )

    if pipeline_logger:
        pipeline_logger.log_transform(
            input_count=len(classified),
            output_count=result.record_count,
            missing_count=result.missing_fields_count,
            dedup_count=dedup_count,
            duration_ms=timer.duration_ms,
        )

    return result


def decode_sources(
    sources: Iterable[tuple[str, bytes]],
    pipeline_logger: Optional[PipelineLogger] = None,
) -> Iterator[list[dict]]:
    """Decode source files, skipping unsupported and undecodable ones.

    A failure in one file never affects the others.

    Args:
        sources: (file name, content) pairs
        pipeline_logger: Optional structured logger for the batch

    Yields:
        Raw records of each successfully decoded file
    """
    for file_name, content in sources:
        decoder = get_decoder(file_name)
        if decoder is None:
            logger.info(
                f"Skipping unsupported file {file_name}",
                extra={"file_name": file_name}
            )
            continue

        rows: list[dict] = []
        error: Optional[DecodeError] = None

        with timed_operation("decode", logger) as timer:
            try:
                rows = decoder.decode(content, file_name=file_name)
            except DecodeError as e:
                error = e

        if error is not None:
            logger.error(
                f"Failed to decode {file_name}: {error}",
                extra={"file_name": file_name, "format": decoder.format_name}
            )
            if pipeline_logger:
                pipeline_logger.log_decode(file_name, 0, timer.duration_ms, error=error)
            continue

        if pipeline_logger:
            pipeline_logger.log_decode(file_name, len(rows), timer.duration_ms)

        yield rows


def process_upload(
    file_name: str,
    content: bytes,
    settings: Optional[Settings] = None,
    batch_id: Optional[str] = None,
) -> BatchResult:
    """Run the full pipeline over one uploaded file or zip bundle.

    Args:
        file_name: Uploaded file name; the extension selects the decoder
        content: Uploaded bytes
        settings: Settings (default: process-wide settings)
        batch_id: Optional batch ID (auto-generated if not provided)

    Returns:
        BatchResult for the upload

    Raises:
        DecodeError: If a zip bundle cannot be opened at all
    """
    if batch_id is None:
        batch_id = uuid.uuid4().hex[:12]

    pipeline_logger = PipelineLogger(source=file_name, batch_id=batch_id)
    pipeline_logger.start("upload")

    try:
        if is_bundle(file_name):
            sources = expand_bundle(content, bundle_name=file_name)
        else:
            sources = [(file_name, content)]
    except DecodeError as e:
        pipeline_logger.error("upload", e)
        raise

    result = process_batch(
        decode_sources(sources, pipeline_logger),
        settings=settings,
        pipeline_logger=pipeline_logger,
    )

    pipeline_logger.success(
        "upload",
        row_count=result.record_count,
        details=pipeline_logger.get_metrics(),
    )

    return result
