"""Structured logging for upload batches.

Every batch event carries the same context fields (source, batch_id,
step, status) so log lines from one upload can be correlated.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


@dataclass
class BatchEvent:
    """One structured pipeline event."""

    source: str
    batch_id: str
    step: str
    status: str
    row_count: Optional[int] = None
    duration_ms: Optional[float] = None
    error: Optional[str] = None
    details: dict = field(default_factory=dict)

    def fields(self) -> dict:
        """Non-empty fields, suitable for `extra=`."""
        return {k: v for k, v in asdict(self).items() if v is not None and v != {}}

    def describe(self) -> str:
        parts = [f"[{self.batch_id}] {self.step} {self.status}"]
        if self.row_count is not None:
            parts.append(f"rows={self.row_count}")
        if self.duration_ms is not None:
            parts.append(f"{self.duration_ms:.1f}ms")
        if self.error:
            parts.append(f"error={self.error}")
        return " ".join(parts)


class PipelineLogger:
    """Structured logger for one upload batch, with decode counters."""

    def __init__(self, source: str, batch_id: str):
        """Initialize pipeline logger.

        Args:
            source: Upload name (e.g., 'contacts.zip')
            batch_id: Unique batch identifier
        """
        self.source = source
        self.batch_id = batch_id
        self.logger = logging.getLogger("datasift.pipeline")
        self._started_at: Optional[float] = None
        self._failed_files = 0
        self._decode_times: list[float] = []

    def _emit(self, level: int, step: str, status: str, **kwargs) -> None:
        event = BatchEvent(
            source=self.source,
            batch_id=self.batch_id,
            step=step,
            status=status,
            **kwargs
        )
        self.logger.log(level, event.describe(), extra=event.fields())

    def _elapsed_ms(self) -> Optional[float]:
        if self._started_at is None:
            return None
        return (time.monotonic() - self._started_at) * 1000

    def start(self, step: str) -> None:
        self._started_at = time.monotonic()
        self._emit(logging.INFO, step, "started")

    def success(self, step: str, **kwargs) -> None:
        self._emit(logging.INFO, step, "success", duration_ms=self._elapsed_ms(), **kwargs)

    def error(self, step: str, error: Exception, **kwargs) -> None:
        self._emit(
            logging.ERROR,
            step,
            "error",
            error=str(error),
            duration_ms=self._elapsed_ms(),
            **kwargs
        )

    def log_decode(
        self,
        file_name: str,
        row_count: int,
        duration_ms: float,
        error: Optional[Exception] = None,
    ) -> None:
        """Record the outcome of decoding one file in the batch."""
        if error is not None:
            self._failed_files += 1
            self._emit(
                logging.ERROR,
                "decode",
                "error",
                row_count=row_count,
                duration_ms=duration_ms,
                error=str(error),
                details={"file_name": file_name},
            )
            return

        self._decode_times.append(duration_ms)
        self._emit(
            logging.INFO,
            "decode",
            "success",
            row_count=row_count,
            duration_ms=duration_ms,
            details={"file_name": file_name},
        )

    def log_transform(
        self,
        input_count: int,
        output_count: int,
        missing_count: int,
        dedup_count: int,
        duration_ms: float,
    ) -> None:
        """Record mapping, classification and deduplication of the batch."""
        self._emit(
            logging.INFO,
            "transform",
            "success",
            row_count=output_count,
            duration_ms=duration_ms,
            details={
                "input_count": input_count,
                "missing_fields_count": missing_count,
                "dedup_count": dedup_count,
            },
        )

    def get_metrics(self) -> dict:
        """Aggregated decode counters for the batch."""
        decoded = len(self._decode_times)
        total_ms = sum(self._decode_times)
        return {
            "decoded_files": decoded,
            "failed_files": self._failed_files,
            "total_decode_time_ms": total_ms,
            "avg_decode_time_ms": total_ms / decoded if decoded else 0,
        }


@dataclass
class Timer:
    started_at: float = field(default_factory=time.monotonic)
    finished_at: Optional[float] = None
    duration_ms: float = 0.0


@contextmanager
def timed_operation(name: str, logger: Optional[logging.Logger] = None) -> Iterator[Timer]:
    """Time the enclosed block.

    Usage:
        with timed_operation("decode") as timer:
            rows = decoder.decode(content)
        print(f"Took {timer.duration_ms}ms")

    Args:
        name: Operation name for logging
        logger: Optional logger for a debug line on exit

    Yields:
        Timer whose duration_ms is set when the block exits
    """
    timer = Timer()
    try:
        yield timer
    finally:
        timer.finished_at = time.monotonic()
        timer.duration_ms = (timer.finished_at - timer.started_at) * 1000
        if logger:
            logger.debug(
                f"Operation '{name}' took {timer.duration_ms:.1f}ms",
                extra={"operation": name, "duration_ms": timer.duration_ms}
            )
