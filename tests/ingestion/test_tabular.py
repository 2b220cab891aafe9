import pytest

from ingestion.errors import FormatError
from ingestion.tabular import RawRecord, decode, map_header
from tests.helpers import csv_text

COLUMNS = [("Name", "name"), ("Amount", "amount"), ("Date", "date")]


class TestMapHeader:
    """Tests for map_header function."""

    def test_case_insensitive_positions(self):
        """Test that headers match regardless of case and order."""
        positions = map_header(["date", "NAME", " Amount "], COLUMNS)
        assert positions == {"name": 1, "amount": 2, "date": 0}

    def test_extra_columns_ignored(self):
        """Test that unknown header cells do not matter."""
        positions = map_header(["Name", "Notes", "Amount", "Date"], COLUMNS)
        assert positions["amount"] == 2

    def test_all_missing_columns_in_one_error(self):
        """Test that every missing column is reported by a single FormatError."""
        with pytest.raises(FormatError) as exc_info:
            map_header(["Name"], COLUMNS)
        assert str(exc_info.value) == "Missing required columns: Amount, Date"


class TestDecode:
    """Tests for decode function."""

    def test_decode_records(self):
        """Test decoding rows into records keyed by column key."""
        table = decode(csv_text("Name,Amount,Date", "Milk,3.50,2025-01-15"), COLUMNS)

        assert table.errors == []
        assert table.records == [
            RawRecord(
                row_number=2,
                fields={"name": "Milk", "amount": "3.50", "date": "2025-01-15"},
            )
        ]

    def test_reordered_columns(self):
        """Test that values follow the header, not the declared order."""
        table = decode(csv_text("Date,Name,Amount", "2025-01-15,Milk,3.50"), COLUMNS)
        assert table.records[0].get("name") == "Milk"
        assert table.records[0].get("date") == "2025-01-15"

    def test_only_newlines_break_rows(self):
        """Test that form feeds and line separators stay inside their field."""
        table = decode(
            "Name,Amount,Date\nMilk\x0cfresh,3.50,2025-01-15\nEggs\u2028brown,2,2025-01-16\n",
            COLUMNS,
        )
        assert [r.row_number for r in table.records] == [2, 3]
        assert table.records[0].get("name") == "Milk\x0cfresh"
        assert table.records[1].get("name") == "Eggs\u2028brown"

    def test_header_only_raises(self):
        """Test that a file without data rows is a format error."""
        with pytest.raises(FormatError, match="at least a header row and one data row"):
            decode("Name,Amount,Date\n", COLUMNS)

    def test_empty_text_raises(self):
        """Test that empty input is a format error."""
        with pytest.raises(FormatError):
            decode("", COLUMNS)

    def test_missing_columns_raise(self):
        """Test that a header missing two columns names both."""
        with pytest.raises(FormatError, match="Missing required columns: Amount, Date"):
            decode(csv_text("Name,Other", "a,b"), COLUMNS)

    def test_short_row_is_row_error(self):
        """Test that a row with too few fields becomes a row error."""
        table = decode(
            csv_text("Name,Amount,Date", "Milk,3.50", "Bread,2.00,2025-01-16"),
            COLUMNS,
        )

        assert len(table.records) == 1
        assert table.records[0].row_number == 3
        assert len(table.errors) == 1
        assert str(table.errors[0]) == "Row 2: Insufficient columns"

    def test_blank_lines_skipped_but_counted(self):
        """Test that blank lines are skipped while row numbers stay physical."""
        table = decode(
            "Name,Amount,Date\n\nMilk,3.50,2025-01-15\n   \nEggs,2,2025-01-16\n",
            COLUMNS,
        )
        assert [r.row_number for r in table.records] == [3, 5]

    def test_windows_line_endings(self):
        """Test that CRLF line endings decode like LF."""
        table = decode("Name,Amount,Date\r\nMilk,3.50,2025-01-15\r\n", COLUMNS)
        assert table.records[0].get("date") == "2025-01-15"

    def test_raw_record_get_default(self):
        """Test that empty values fall back to the default."""
        record = RawRecord(row_number=2, fields={"name": ""})
        assert record.get("name", "x") == "x"
        assert record.get("missing") == ""
