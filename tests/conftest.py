"""Pytest configuration and fixtures."""

import io
import logging
import zipfile
from datetime import datetime

import pytest
from openpyxl import Workbook

from datasift.config import Settings, get_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate tests from DATASIFT_* variables and the settings cache."""
    for name in (
        "DATASIFT_MATCH_THRESHOLD",
        "DATASIFT_MIN_CONTACT_DIGITS",
        "DATASIFT_SYNONYMS_FILE",
        "DATASIFT_MAX_UPLOAD_BYTES",
        "DATASIFT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo root logger changes made by CLI entrypoints."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def settings():
    """Default settings."""
    return Settings()


@pytest.fixture
def sample_table():
    """Raw rows as a CSV decoder would produce them."""
    return [
        {"Full Name": "john o'brien", "Mobile": "555-12-34", "DOB": "2020/1/5"},
        {"Full Name": "JANE   doe", "Mobile": "(555) 987-6543", "DOB": "1999-12-31"},
        {"Full Name": "john o'brien", "Mobile": "555-12-34", "DOB": "2020/1/5"},
    ]


@pytest.fixture
def complete_table():
    """Rows with all four fields present."""
    return [
        {
            "Customer": "alice smith",
            "Phone": "+1 555 000 1111",
            "Joined": "2023-03-04",
            "City": "Springfield",
        },
        {
            "Customer": "bob jones",
            "Phone": "555-000-2222",
            "Joined": "2023-05-06",
            "City": None,
        },
    ]


def _csv_bytes(rows: list[list[str]]) -> bytes:
    return "\n".join(",".join(row) for row in rows).encode("utf-8")


def _xlsx_bytes(rows: list[list]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def csv_bytes():
    """A small CSV upload."""
    return _csv_bytes([
        ["Full Name", "Mobile", "DOB", "Address"],
        ["john o'brien", "555-12-34", "2020/1/5", "1 Main St"],
        ["jane doe", "555 987 6543", "1999-12-31", ""],
    ])


@pytest.fixture
def xlsx_bytes():
    """A small XLSX upload with typed cells."""
    return _xlsx_bytes([
        ["Name", "Phone", "Date", "Location"],
        ["mary major", 5559876543, datetime(2021, 7, 8, 14, 30), "2 Elm Rd"],
        [None, None, None, None],
        ["john o'brien", "555-12-34", "2020-01-05", None],
    ])


@pytest.fixture
def make_bundle():
    """Build a zip archive from (name, bytes) pairs."""
    def _make(members: list[tuple[str, bytes]]) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as archive:
            for name, content in members:
                archive.writestr(name, content)
        return buffer.getvalue()

    return _make
