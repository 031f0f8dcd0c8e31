"""Parsers turning delimited exports and JSON payloads into raw records."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from loguru import logger

from aggbench.core.data.ingestion.models import RawRecord
from aggbench.core.exceptions.base import DataFormatError

TAB = "\t"
COMMA = ","


def detect_delimiter(header_line: str) -> str:
    """Tab when the header line contains one, comma otherwise."""

    return TAB if TAB in header_line else COMMA


def parse_delimited(content: str) -> list[RawRecord]:
    """Parse a tab- or comma-separated export into raw records.

    The first line holds the headers. Rows whose field count differs from the
    header count are dropped without being reported.
    """

    lines = content.strip().split("\n")
    if len(lines) < 2:
        return []

    delimiter = detect_delimiter(lines[0])
    headers = [header.strip() for header in lines[0].split(delimiter)]

    records: list[RawRecord] = []
    for line in lines[1:]:
        values = [value.strip() for value in line.split(delimiter)]
        if len(values) != len(headers):
            continue
        records.append(RawRecord.from_mapping(dict(zip(headers, values))))

    logger.debug(
        "Parsed delimited export",
        delimiter="tab" if delimiter == TAB else "comma",
        rows=len(records),
    )
    return records


def coerce_records(items: Iterable[object]) -> list[RawRecord]:
    """Build raw records from already structured rows (e.g. decoded JSON)."""

    records: list[RawRecord] = []
    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            raise DataFormatError(
                f"raw record at index {index} is not an object",
                format_name="json",
                details={"index": index, "type": type(item).__name__},
            )
        records.append(RawRecord.from_mapping(item))
    return records


__all__ = ["COMMA", "TAB", "coerce_records", "detect_delimiter", "parse_delimited"]
