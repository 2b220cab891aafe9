"""Error types shared by the import pipeline and the backup codec."""


class FormatError(ValueError):
    """The input text as a whole cannot be imported.

    Raised before any row is processed: no header, no data rows, or a header
    that is missing required columns.
    """


class RowError(Exception):
    """A single input row could not be decoded or validated.

    Row errors are raised inside per-row processing and collected into an
    ImportResult; they never stop the remaining rows from being processed.

    Attributes:
        row_number: 1-based row number in the source (header is row 1).
        reason: Human readable reason.
        label: Prefix used when rendering, e.g. "Row" or "Expenses row".
    """

    def __init__(self, row_number: int, reason: str, label: str = "Row"):
        super().__init__(reason)
        self.row_number = row_number
        self.reason = reason
        self.label = label

    def __str__(self) -> str:
        return f"{self.label} {self.row_number}: {self.reason}"


class RestoreError(Exception):
    """A backup document was refused; nothing was restored."""
