"""Command-line entrypoint: files -> clean -> CSV/XLSX.

Usage:
    python -m datasift.process_upload contacts.csv
    python -m datasift.process_upload bundle.zip --output cleaned.xlsx
    python -m datasift.process_upload a.csv b.xlsx --output out.csv --include-status
"""

import argparse
import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from datasift.config import Settings, get_settings
from datasift.decoders import DecodeError
from datasift.pipeline import BatchResult, process_upload
from datasift.transform.dedupe import dedupe_records
from datasift.utils import setup_logging, write_records

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def process_paths(
    paths: list[str],
    batch_id: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> tuple[BatchResult, dict]:
    """Process local files as uploads and merge them into one batch.

    Deduplication runs again over the merged records so that duplicates
    across files are removed.

    Args:
        paths: Files or zip bundles to process
        batch_id: Optional batch ID (auto-generated if not provided)
        settings: Settings (default: process-wide settings)

    Returns:
        Tuple of (merged BatchResult, per-file results)
    """
    if batch_id is None:
        batch_id = uuid.uuid4().hex[:12]

    merged = []
    dedup_count = 0
    files_processed = 0
    results = {}

    for path in paths:
        try:
            content = Path(path).read_bytes()
            result = process_upload(Path(path).name, content, settings=settings, batch_id=batch_id)
        except (OSError, DecodeError) as e:
            logger.error(f"Failed to process {path}: {e}")
            results[path] = {"status": "error", "error": str(e)}
            continue

        merged.extend(result.data)
        dedup_count += result.dedup_count
        files_processed += result.files_processed
        results[path] = {
            "status": "success",
            "files_processed": result.files_processed,
            "record_count": result.record_count,
            "dedup_count": result.dedup_count,
        }

    deduped, cross_file_duplicates = dedupe_records(merged)

    batch = BatchResult(
        record_count=len(deduped),
        dedup_count=dedup_count + cross_file_duplicates,
        files_processed=files_processed,
        data=deduped,
    )

    return batch, results


def run_extraction(
    paths: list[str],
    output: Optional[str] = None,
    include_status: bool = False,
    batch_id: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> dict:
    """Process files and optionally write the cleaned records.

    Returns:
        Run summary
    """
    if batch_id is None:
        batch_id = uuid.uuid4().hex[:12]

    start_time = datetime.now(timezone.utc)

    logger.info(
        "Starting extraction run",
        extra={"batch_id": batch_id, "paths": paths}
    )

    batch, results = process_paths(paths, batch_id=batch_id, settings=settings)

    output_metadata = None
    if output:
        output_metadata = write_records(batch.data, output, include_status=include_status)

    end_time = datetime.now(timezone.utc)
    duration_seconds = (end_time - start_time).total_seconds()

    summary = {
        "batch_id": batch_id,
        "status": "success" if batch.files_processed > 0 else "failure",
        "files_processed": batch.files_processed,
        "record_count": batch.record_count,
        "dedup_count": batch.dedup_count,
        "missing_fields_count": batch.missing_fields_count,
        "output": output_metadata,
        "duration_seconds": duration_seconds,
        "started_at": start_time.isoformat(),
        "completed_at": end_time.isoformat(),
        "results": results,
    }

    logger.info(
        f"Extraction run complete: {batch.record_count} records in {duration_seconds:.2f}s",
        extra={"batch_id": batch_id, "record_count": batch.record_count}
    )

    return summary


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint."""
    parser = argparse.ArgumentParser(
        description="Map, clean and deduplicate contact records from CSV/XLSX/PDF/ZIP files"
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="Input files (.csv, .xlsx, .pdf, or .zip bundles)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write cleaned records to this .csv or .xlsx file",
    )
    parser.add_argument(
        "--include-status",
        action="store_true",
        help="Add the DATA_STATUS column to the output file",
    )
    parser.add_argument(
        "--batch-id",
        type=str,
        default=None,
        help="Batch ID (auto-generated if not provided)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level (default: DATASIFT_LOG_LEVEL or INFO)",
    )

    args = parser.parse_args(argv)

    if args.output and Path(args.output).suffix.lower() not in (".csv", ".xlsx"):
        parser.error("--output must end in .csv or .xlsx")

    settings = get_settings()
    setup_logging(level=args.log_level or settings.log_level, json_format=True)

    summary = run_extraction(
        paths=args.paths,
        output=args.output,
        include_status=args.include_status,
        batch_id=args.batch_id,
        settings=settings,
    )

    print(json.dumps(summary, indent=2, default=str))

    # Exit with error code if nothing could be decoded
    return 0 if summary["status"] == "success" else 1


if __name__ == "__main__":
    sys.exit(main())
