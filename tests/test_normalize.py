"""Tests for field normalizers."""

import re
from datetime import date, datetime, timedelta, timezone

import pytest

from datasift.transform.normalize import (
    normalize_address,
    normalize_contact,
    normalize_date,
    normalize_name,
)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class TestNormalizeDate:
    """Tests for date normalization."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2020/1/5", "2020-01-05"),
            ("2024-01-15T10:30:00Z", "2024-01-15"),
            ("March 4, 2023", "2023-03-04"),
            ("2023-03-04 23:59:59", "2023-03-04"),
        ],
    )
    def test_parse_common_text(self, value, expected):
        """Test common date/time text."""
        assert normalize_date(value) == expected

    def test_aware_datetime_converted_to_utc(self):
        """Test offsets shift the calendar date to UTC."""
        assert normalize_date("2024-01-15T23:30:00-05:00") == "2024-01-16"

    def test_datetime_and_date_objects(self):
        """Test spreadsheet-style date cells."""
        assert normalize_date(datetime(2021, 7, 8, 14, 30)) == "2021-07-08"
        assert normalize_date(date(2021, 7, 8)) == "2021-07-08"
        tz = timezone(timedelta(hours=10))
        assert normalize_date(datetime(2021, 7, 8, 2, 0, tzinfo=tz)) == "2021-07-07"

    def test_unix_seconds(self):
        """Test epoch seconds."""
        assert normalize_date(1705315800) == "2024-01-15"

    def test_unix_milliseconds(self):
        """Test epoch milliseconds."""
        assert normalize_date(1705315800000) == "2024-01-15"

    def test_output_pattern(self):
        """Test output always matches YYYY-MM-DD."""
        for value in ("1/2/2003", "2003-02-01", 0, datetime(1999, 1, 1)):
            assert DATE_PATTERN.match(normalize_date(value))

    @pytest.mark.parametrize(
        "value",
        [
            None,
            "",
            "   ",
            "not a date",
            "2020-02-30",
            True,
            [],
            float("nan"),
            "9999-12-31T23:00:00-05:00",
            "0001-01-01T00:00:00+01:00",
            "2020-01-05T00:00:00+99:00",
            "1/1/1 1:1:1 +9999",
        ],
    )
    def test_invalid_returns_none(self, value):
        """Test unparsable values."""
        assert normalize_date(value) is None


class TestNormalizeName:
    """Tests for name normalization."""

    def test_title_cases_words(self):
        """Test title casing of each token."""
        assert normalize_name("jOHN   smith") == "John Smith"

    def test_strips_non_letters(self):
        """Test punctuation and digits are removed without a replacement."""
        assert normalize_name("john o'brien") == "John Obrien"
        assert normalize_name("  Mary-Jane 3rd ") == "Maryjane Rd"

    def test_only_symbols_returns_none(self):
        """Test values with no letters."""
        assert normalize_name("12345 !!") is None
        assert normalize_name("") is None

    def test_non_text_returns_none(self):
        """Test numbers and None."""
        assert normalize_name(None) is None
        assert normalize_name(42) is None

    def test_non_ascii_letters_removed(self):
        """Test only ASCII letters survive."""
        assert normalize_name("José Müller") == "Jos Mller"

    @pytest.mark.parametrize("value", ["John Smith", "A", "Mary Ann Lee"])
    def test_idempotent(self, value):
        """Test normalizing a normalized name is a no-op."""
        assert normalize_name(value) == value
        assert normalize_name(normalize_name("  mARY  ann  lee ")) == "Mary Ann Lee"


class TestNormalizeContact:
    """Tests for phone normalization."""

    def test_keeps_digits_in_order(self):
        """Test separators are removed."""
        assert normalize_contact("555-12-34") == "5551234"
        assert normalize_contact("+1 (555) 987-6543") == "15559876543"

    def test_six_digits_is_enough(self):
        """Test the minimum length boundary."""
        assert normalize_contact("12-34-56") == "123456"
        assert normalize_contact("12-34-5") is None

    def test_numbers_from_spreadsheets(self):
        """Test numeric cells, including float-typed integers."""
        assert normalize_contact(5559876543) == "5559876543"
        assert normalize_contact(5559876543.0) == "5559876543"

    def test_absent_returns_none(self):
        """Test None and text without digits."""
        assert normalize_contact(None) is None
        assert normalize_contact("n/a") is None

    def test_only_ascii_digits_count(self):
        """Test non-ASCII digit characters are stripped like other symbols."""
        assert normalize_contact("\uff10\uff11\uff12\uff13\uff14\uff15\uff16\uff17") is None
        assert normalize_contact("\u0660\u0661\u0662\u0663\u0664\u0665\u0666\u0667") is None
        assert normalize_contact("555\uff11234567") == "555234567"

    def test_custom_minimum(self):
        """Test the configurable digit minimum."""
        assert normalize_contact("1234", min_digits=4) == "1234"
        assert normalize_contact("1234567", min_digits=10) is None


class TestNormalizeAddress:
    """Tests for address passthrough."""

    def test_passthrough(self):
        """Test values are returned unchanged."""
        assert normalize_address("  12 High St ") == "  12 High St "
        assert normalize_address(None) is None
        assert normalize_address(0) == 0
