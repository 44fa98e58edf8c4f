"""
Source normalization.

Turns one of four heterogeneous guest-list inputs into an ordered list of
attendee records:

- delimited text (CSV/TSV/...) with a header row
- spreadsheet rows (first sheet only, first row is the header)
- extracted document text, one entry per page
- a free-typed block: a table if it looks like one, otherwise one ID per line

Nothing here touches the registry; callers install the returned list.
"""
import csv
import io
import logging
from datetime import date, time
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Sequence, Union

from checkin.core.config import settings
from checkin.core.exceptions import MalformedTable, UnsupportedFormat
from checkin.models.attendee import (
    AttendeeRecord,
    FALLBACK_ID_FIELD,
    FALLBACK_NAME_FIELD,
    RAW_CONTENT_FIELD,
)

logger = logging.getLogger(__name__)

_OVERFLOW_KEY = "__overflow__"
_SNIFF_SAMPLE_SIZE = 4096


class SourceKind(str, Enum):
    DELIMITED = "delimited"
    SPREADSHEET = "spreadsheet"
    DOCUMENT = "document"
    FREE_TEXT = "free_text"


def _clean_header(name: Optional[str]) -> str:
    if name is None:
        return ""
    return str(name).replace("\ufeff", "").strip()


def _sniff_dialect(text: str):
    try:
        return csv.Sniffer().sniff(text[:_SNIFF_SAMPLE_SIZE], delimiters=settings.CSV_DELIMITERS)
    except csv.Error:
        return csv.excel


def parse_delimited(text: str) -> List[AttendeeRecord]:
    """Header-plus-rows table; rows with no populated cell are skipped"""
    if not text or not text.strip():
        return []

    reader = csv.DictReader(io.StringIO(text), dialect=_sniff_dialect(text), restkey=_OVERFLOW_KEY)
    reader.fieldnames = [_clean_header(name) for name in (reader.fieldnames or [])]

    records = []
    for row in reader:
        row.pop(_OVERFLOW_KEY, None)
        record = {
            key: value.strip() if value is not None else None
            for key, value in row.items()
        }
        if not any(record.values()):
            continue
        records.append(record)
    return records


def cell_text(value: Any) -> Optional[str]:
    """Stringify a spreadsheet cell; empty cells come back as None"""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (date, time)):
        return value.isoformat()
    text = str(value).strip()
    return text or None


def parse_sheet_rows(rows: Iterable[Sequence[Any]]) -> List[AttendeeRecord]:
    """Sheet rows to records keyed by the sheet's own header row"""
    rows = iter(rows)

    header = None
    for row in rows:
        if any(cell_text(cell) for cell in row):
            header = [_clean_header(cell_text(cell)) for cell in row]
            break
    if header is None:
        return []

    records = []
    for row in rows:
        record = {}
        for name, cell in zip(header, row):
            text = cell_text(cell)
            if text is not None:
                record[name] = text
        if record:
            records.append(record)
    return records


def parse_document_pages(pages: Union[str, Iterable[Union[str, Sequence[str]]]]) -> List[AttendeeRecord]:
    """
    One record per page holding the whole page text.
    A page may be given as a single string or as its text fragments.
    """
    if isinstance(pages, str):
        pages = [pages]

    records = []
    for page in pages:
        if page is None:
            text = ""
        elif isinstance(page, str):
            text = page
        else:
            text = " ".join(str(item) for item in page if item is not None)
        records.append({RAW_CONTENT_FIELD: text})

    if records and not any(record[RAW_CONTENT_FIELD].strip() for record in records):
        logger.warning(f"⚠️ None of the {len(records)} document page(s) contain text; "
                       f"scans cannot match this list (scanned images are not OCR'd)")
    return records


def looks_tabular(records: Sequence[AttendeeRecord]) -> bool:
    """A parsed block counts as a table when it has a row and more than one column"""
    return len(records) >= 1 and len(records[0]) > 1


def parse_id_lines(text: str) -> List[AttendeeRecord]:
    return [
        {FALLBACK_ID_FIELD: line.strip(), FALLBACK_NAME_FIELD: settings.FREE_TEXT_ATTENDEE_NAME}
        for line in text.splitlines()
        if line.strip()
    ]


def normalize_free_text(
    text: str,
    is_tabular: Callable[[Sequence[AttendeeRecord]], bool] = looks_tabular
) -> List[AttendeeRecord]:
    if text is None or not str(text).strip():
        return []

    records = parse_delimited(text)
    if is_tabular(records):
        logger.info("Pasted list parsed as a table")
        return records

    logger.info("Pasted list treated as one ID per line")
    return parse_id_lines(text)


_NORMALIZERS = {
    SourceKind.DELIMITED: parse_delimited,
    SourceKind.SPREADSHEET: parse_sheet_rows,
    SourceKind.DOCUMENT: parse_document_pages,
    SourceKind.FREE_TEXT: normalize_free_text,
}


def coerce_source_kind(source_kind: Union[SourceKind, str]) -> SourceKind:
    try:
        return SourceKind(source_kind)
    except ValueError:
        raise UnsupportedFormat(f"Unsupported source kind: {source_kind!r}")


def normalize(source_kind: Union[SourceKind, str], raw_input: Any) -> List[AttendeeRecord]:
    """
    Normalize raw input of the given kind into attendee records.
    Raises UnsupportedFormat for an unknown kind and MalformedTable when
    nothing usable comes out.
    """
    kind = coerce_source_kind(source_kind)
    records = _NORMALIZERS[kind](raw_input)

    if not records:
        raise MalformedTable("No attendee records found in the provided list")

    logger.info(f"Normalized {len(records)} records from {kind.value} source")
    return records
