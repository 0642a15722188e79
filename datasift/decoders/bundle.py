"""Zip bundle expansion and decoder lookup."""

import io
import logging
import zipfile
import zlib
from pathlib import PurePosixPath
from typing import Optional

from datasift.decoders.base import BaseDecoder, DecodeError
from datasift.decoders.csv_decoder import CsvDecoder
from datasift.decoders.pdf_decoder import PdfDecoder
from datasift.decoders.xlsx_decoder import XlsxDecoder

logger = logging.getLogger(__name__)

BUNDLE_EXTENSIONS = (".zip",)
IGNORED_PREFIXES = ("__MACOSX",)

DECODERS: tuple[BaseDecoder, ...] = (CsvDecoder(), XlsxDecoder(), PdfDecoder())


def file_extension(file_name: str) -> str:
    """Lowercase extension including the dot, e.g. ".csv"."""
    return PurePosixPath(file_name).suffix.lower()


def is_bundle(file_name: str) -> bool:
    return file_extension(file_name) in BUNDLE_EXTENSIONS


def get_decoder(file_name: str) -> Optional[BaseDecoder]:
    """Decoder for a file name, or None if the format is unsupported."""
    extension = file_extension(file_name)
    for decoder in DECODERS:
        if extension in decoder.extensions:
            return decoder
    return None


def expand_bundle(content: bytes, bundle_name: Optional[str] = None) -> list[tuple[str, bytes]]:
    """List the files inside a zip archive.

    Directories and macOS resource-fork entries are skipped.

    Args:
        content: Zip archive bytes
        bundle_name: Archive name, for errors

    Returns:
        List of (member name, member bytes) in archive order

    Raises:
        DecodeError: If the archive itself cannot be read
    """
    try:
        with zipfile.ZipFile(io.BytesIO(content)) as archive:
            members = []
            for info in archive.infolist():
                if info.is_dir() or info.filename.startswith(IGNORED_PREFIXES):
                    continue
                try:
                    members.append((info.filename, archive.read(info)))
                except (zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError) as e:
                    # Encrypted, corrupt, or unsupported compression
                    logger.error(
                        f"Skipping unreadable bundle member {info.filename}: {e}",
                        extra={"bundle": bundle_name, "member": info.filename}
                    )
    except (zipfile.BadZipFile, zipfile.LargeZipFile) as e:
        raise DecodeError(f"Could not open bundle: {e}", file_name=bundle_name) from e

    logger.info(
        f"Expanded bundle with {len(members)} files",
        extra={"bundle": bundle_name, "file_count": len(members)}
    )

    return members
