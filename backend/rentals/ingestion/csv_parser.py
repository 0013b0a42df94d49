"""
Line-oriented CSV parsing for listing exports.

Exports from listing sources are loosely formatted: quoted fields may
contain commas, line endings vary, and rows are often short. Each line is
treated as one record; commas inside double quotes do not split fields.
"""

import re
from typing import Iterator, Union

from ..exceptions import ParseError
from .protocols import RawRow

# A comma followed by an even number of quotes up to end of line is outside any quoted span
_FIELD_SPLIT = re.compile(r',(?=(?:[^"]*"[^"]*")*[^"]*$)')
_LINE_SPLIT = re.compile(r'\r\n|\r|\n')


def decode_text(raw: Union[bytes, str]) -> str:
    """Decode source bytes as UTF-8, dropping a leading byte-order mark."""
    if isinstance(raw, str):
        return raw[1:] if raw.startswith('\ufeff') else raw
    try:
        return raw.decode('utf-8-sig')
    except UnicodeDecodeError as e:
        raise ParseError(f"Source is not valid UTF-8 text: {e}") from e


def unquote(value: str) -> str:
    """Trim a field and strip one pair of surrounding double quotes."""
    trimmed = value.strip()
    if len(trimmed) >= 2 and trimmed.startswith('"') and trimmed.endswith('"'):
        return trimmed[1:-1].replace('""', '"')
    return trimmed


def split_line(line: str) -> list[str]:
    """Split one CSV line on top-level commas."""
    return [unquote(part) for part in _FIELD_SPLIT.split(line)]


def _content_lines(text: str) -> Iterator[str]:
    for line in _LINE_SPLIT.split(text):
        if line.strip():
            yield line


def read_header(raw: Union[bytes, str]) -> list[str]:
    """Return the header columns, or an empty list for empty input."""
    for line in _content_lines(decode_text(raw)):
        return split_line(line)
    return []


def parse_rows(raw: Union[bytes, str]) -> Iterator[RawRow]:
    """
    Lazily parse CSV text into rows keyed by header name.

    Calling again with the same text yields the same rows.

    Args:
        raw: Source text (or UTF-8 bytes)

    Yields:
        RawRow per non-blank data line. Short rows are padded with empty
        strings; values beyond the header are dropped.

    Raises:
        ParseError: if bytes input is not decodable
    """
    text = decode_text(raw)
    lines = _content_lines(text)

    header_line = next(lines, None)
    if header_line is None:
        return
    headers = split_line(header_line)

    for line in lines:
        values = split_line(line)
        yield {
            header: values[index] if index < len(values) else ""
            for index, header in enumerate(headers)
        }
