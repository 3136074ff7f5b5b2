"""Quote-aware CSV tokenizer for the Toronto open-data exports.

The parser never raises: short rows are padded with empty strings and
surplus fields are ignored, leaving validation to the normalizer.
"""

from typing import Dict, List

_BOM = "\ufeff"


def parse_csv_line(line: str) -> List[str]:
    """Split one line on commas that are not inside double quotes.

    Every ``"`` toggles the in-quotes state and is dropped from the output;
    doubled quotes are not treated as an escape.
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)

    fields.append("".join(current))
    return fields


def parse_csv(text: str) -> List[Dict[str, str]]:
    """Parse CSV text into header-keyed records.

    Args:
        text: Raw CSV content; the first non-blank line is the header

    Returns:
        One dict per data line, mapping trimmed header to trimmed value
    """
    if text.startswith(_BOM):
        text = text[len(_BOM):]

    lines = [line for line in text.split("\n") if line.strip()]
    if not lines:
        return []

    headers = [h.strip() for h in parse_csv_line(lines[0])]

    records: List[Dict[str, str]] = []
    for line in lines[1:]:
        values = parse_csv_line(line)
        record = {}
        for i, header in enumerate(headers):
            record[header] = values[i].strip() if i < len(values) else ""
        records.append(record)

    return records
