"""Field-level parsing and quoting for delimited text."""

from typing import List, Optional

QUOTE = '"'


def _finish_field(chars: List[str], quote_start: Optional[int], quote_end: int) -> str:
    # Only text outside the quotes is trimmed
    if quote_start is None:
        return "".join(chars).strip()
    head = "".join(chars[:quote_start]).lstrip()
    tail = "".join(chars[quote_end:]).rstrip()
    return head + "".join(chars[quote_start:quote_end]) + tail


def parse_line(line: str, delimiter: str = ",") -> List[str]:
    """Split one line of delimited text into fields.

    A field may be wrapped in double quotes. Inside quotes a doubled quote is a
    literal quote and the delimiter is ordinary text. Whitespace outside the
    quotes is stripped; quoted text is kept as written. An unterminated quote
    runs to the end of the line.

    Args:
        line: A single line, without its line terminator.
        delimiter: Field separator.

    Returns:
        List of field values; never empty (a blank line yields [""]).
    """
    fields = []
    current = []
    in_quotes = False
    quote_start = None
    quote_end = 0
    i = 0
    length = len(line)

    while i < length:
        char = line[i]

        if char == QUOTE:
            if in_quotes and i + 1 < length and line[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 2
                continue
            if in_quotes:
                quote_end = len(current)
            elif quote_start is None:
                quote_start = len(current)
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append(_finish_field(current, quote_start, quote_end))
            current = []
            quote_start = None
            quote_end = 0
        else:
            current.append(char)
        i += 1

    if in_quotes:
        quote_end = len(current)
    fields.append(_finish_field(current, quote_start, quote_end))
    return fields


def quote_field(value, delimiter: str = ",") -> str:
    """Encode a single value so that parse_line() returns it unchanged.

    Values containing the delimiter or a quote, or with leading or trailing
    whitespace, are wrapped in quotes with embedded quotes doubled.
    """
    text = "" if value is None else str(value)
    if delimiter in text or QUOTE in text or text != text.strip():
        return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE
    return text


def join_fields(values, delimiter: str = ",") -> str:
    """Quote and join values into one line of delimited text."""
    return delimiter.join(quote_field(value, delimiter) for value in values)
