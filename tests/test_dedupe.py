"""Tests for record deduplication."""

from datasift.transform.dedupe import dedupe_records, identity_key
from datasift.transform.records import ClassifiedRecord, RecordStatus


def make_record(name=None, contact=None, date=None, address=None):
    values = (date, name, contact, address)
    status = RecordStatus.MISSING_FIELDS if None in values else RecordStatus.VALID
    return ClassifiedRecord(
        date=date,
        full_name=name,
        contact=contact,
        address=address,
        status=status,
    )


class TestIdentityKey:
    """Tests for composite key construction."""

    def test_key_order_and_separator(self):
        """Test name, contact, date joined by hyphens."""
        record = make_record("Ann Lee", "5551234", "2020-01-05")
        assert identity_key(record) == "Ann Lee-5551234-2020-01-05"

    def test_nulls_rendered_as_text(self):
        """Test missing values appear as 'null'."""
        assert identity_key(make_record()) == "null-null-null"

    def test_address_not_part_of_key(self):
        """Test records differing only by address share a key."""
        a = make_record("Ann Lee", "5551234", "2020-01-05", "1 Main St")
        b = make_record("Ann Lee", "5551234", "2020-01-05", "2 Elm Rd")
        assert identity_key(a) == identity_key(b)


class TestDedupeRecords:
    """Tests for first-seen deduplication."""

    def test_keeps_first_seen_in_order(self):
        """Test survivors keep their relative order."""
        r1 = make_record("Ann Lee", "5551234", "2020-01-05", "first")
        r2 = make_record("Bob Ray", "5550000", "2021-02-03")
        r3 = make_record("Ann Lee", "5551234", "2020-01-05", "second")
        r4 = make_record("Cy Twombly", "5559999", "2022-03-04")

        deduped, removed = dedupe_records([r1, r2, r3, r4])

        assert deduped == [r1, r2, r4]
        assert deduped[0].address == "first"
        assert removed == 1

    def test_idempotent(self):
        """Test deduping deduped output removes nothing."""
        records = [
            make_record("Ann Lee", "5551234", "2020-01-05"),
            make_record("Ann Lee", "5551234", "2020-01-05"),
            make_record("Bob Ray"),
        ]

        once, removed_once = dedupe_records(records)
        twice, removed_twice = dedupe_records(once)

        assert removed_once == 1
        assert twice == once
        assert removed_twice == 0

    def test_empty_records_collapse(self):
        """Test fully empty records share the 'null' key."""
        records = [make_record(address="a"), make_record(address="b"), make_record()]

        deduped, removed = dedupe_records(records)

        assert len(deduped) == 1
        assert deduped[0].address == "a"
        assert removed == 2

    def test_empty_input(self):
        """Test deduplication of an empty list."""
        assert dedupe_records([]) == ([], 0)

    def test_accepts_iterators(self):
        """Test any iterable is accepted."""
        records = (make_record("Ann Lee") for _ in range(3))
        deduped, removed = dedupe_records(records)

        assert len(deduped) == 1
        assert removed == 2
