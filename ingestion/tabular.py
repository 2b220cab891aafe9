"""Decoding of header-led delimited text into raw records."""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from ingestion.errors import FormatError, RowError
from ingestion.fields import parse_line

# (header as written in the file, key used in RawRecord.fields)
Column = Tuple[str, str]


@dataclass
class RawRecord:
    """Decoded but unvalidated row.

    Attributes:
        row_number: 1-based physical row number in the source.
        fields: Field values keyed by column key. Missing values are "".
    """

    row_number: int
    fields: Dict[str, str]

    def get(self, key: str, default: str = "") -> str:
        value = self.fields.get(key)
        return value if value else default


@dataclass
class DecodedTable:
    """Result of decoding a whole text: the good rows plus the bad ones."""

    records: List[RawRecord] = field(default_factory=list)
    errors: List[RowError] = field(default_factory=list)


def map_header(header: Sequence[str], columns: Sequence[Column]) -> Dict[str, int]:
    """Map each column key to its position in the header row.

    Matching is case-insensitive exact comparison of the trimmed header cell.

    Raises:
        FormatError: Listing every expected column that is absent.
    """
    positions = {}
    normalized = [cell.strip().lower() for cell in header]
    missing = []

    for name, key in columns:
        try:
            positions[key] = normalized.index(name.lower())
        except ValueError:
            missing.append(name)

    if missing:
        raise FormatError(f"Missing required columns: {', '.join(missing)}")

    return positions


def decode(
    text: str, columns: Sequence[Column], delimiter: str = ","
) -> DecodedTable:
    """Decode delimited text with a header row into raw records.

    Args:
        text: Full file content.
        columns: Expected columns as (header, key) pairs.
        delimiter: Field separator.

    Returns:
        DecodedTable with one RawRecord per decodable data row and one
        RowError per row with too few fields.

    Raises:
        FormatError: If there is no header or no data row, or if the header is
            missing expected columns.
    """
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    numbered = [
        (index + 1, line) for index, line in enumerate(lines) if line.strip()
    ]

    if len(numbered) < 2:
        raise FormatError(
            "CSV file must contain at least a header row and one data row"
        )

    header_row, header_line = numbered[0]
    header = parse_line(header_line, delimiter)
    positions = map_header(header, columns)

    table = DecodedTable()
    for row_number, line in numbered[1:]:
        values = parse_line(line.strip(), delimiter)
        if len(values) < len(header):
            table.errors.append(RowError(row_number, "Insufficient columns"))
            continue

        table.records.append(
            RawRecord(
                row_number=row_number,
                fields={key: values[index] for key, index in positions.items()},
            )
        )

    return table

