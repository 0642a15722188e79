"""Base decoder with common error handling and logging."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

logger = logging.getLogger(__name__)

RawRecord = dict[str, Any]


class DecodeError(Exception):
    """Raised when a source file cannot be decoded into rows."""

    def __init__(self, message: str, file_name: Optional[str] = None):
        self.file_name = file_name
        prefix = f"{file_name}: " if file_name else ""
        super().__init__(f"{prefix}{message}")


def clean_cell(value: Any) -> Any:
    """Trim text cells; blank text becomes None."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class BaseDecoder(ABC):
    """Base class turning the bytes of one file into raw records."""

    format_name: str = ""
    extensions: tuple[str, ...] = ()

    @abstractmethod
    def _decode(self, content: bytes) -> list[RawRecord]:
        """Parse content into records. May raise anything."""
        pass

    def decode(self, content: bytes, file_name: Optional[str] = None) -> list[RawRecord]:
        """Decode file content into raw records.

        Args:
            content: Raw file bytes
            file_name: Source name, for logging and errors

        Returns:
            One record (header -> value) per row

        Raises:
            DecodeError: If the content cannot be parsed
        """
        start_time = time.time()

        try:
            records = self._decode(content)
        except DecodeError:
            raise
        except Exception as e:
            raise DecodeError(
                f"Could not decode {self.format_name}: {e}", file_name=file_name
            ) from e

        duration_ms = (time.time() - start_time) * 1000
        logger.debug(
            f"Decoded {len(records)} rows",
            extra={
                "file_name": file_name,
                "format": self.format_name,
                "row_count": len(records),
                "duration_ms": round(duration_ms, 2),
            }
        )

        return records
