"""Uploaded list file reader tests."""

import io

import pytest
from openpyxl import Workbook
from pypdf import PdfWriter

from checkin.core.exceptions import MalformedTable, UnsupportedFormat
from checkin.services.normalizer import SourceKind, normalize
from checkin.services.readers import file_extension, read_list_upload


def _xlsx_bytes(*sheets) -> bytes:
    workbook = Workbook()
    workbook.remove(workbook.active)
    for title, rows in sheets:
        sheet = workbook.create_sheet(title)
        for row in rows:
            sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def _blank_pdf_bytes(pages: int) -> bytes:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=72, height=72)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.mark.parametrize(
    "filename, expected",
    [("guests.CSV", "csv"), ("list.final.xlsx", "xlsx"), ("noext", ""), (None, "")],
)
def test_file_extension(filename, expected):
    assert file_extension(filename) == expected


def test_csv_is_read_as_delimited_text():
    content = "\ufeffregistration_id,display_name\nA100,Alice\n".encode("utf-8")
    kind, raw = read_list_upload("guests.csv", content)
    assert kind is SourceKind.DELIMITED
    assert raw.startswith("registration_id")
    assert normalize(kind, raw) == [{"registration_id": "A100", "display_name": "Alice"}]


def test_csv_that_is_not_utf8_is_malformed():
    with pytest.raises(MalformedTable):
        read_list_upload("guests.csv", b"\xff\xfe\x00\xd8broken")


def test_xlsx_reads_first_sheet_only():
    content = _xlsx_bytes(
        ("Guests", [["RegistrationID", "display_name"], ["R-1", "Alice"], [1002, "Bob"]]),
        ("Staff", [["RegistrationID", "display_name"], ["S-1", "Sam"]]),
    )
    kind, rows = read_list_upload("guests.xlsx", content)
    assert kind is SourceKind.SPREADSHEET

    records = normalize(kind, rows)
    assert records == [
        {"RegistrationID": "R-1", "display_name": "Alice"},
        {"RegistrationID": "1002", "display_name": "Bob"},
    ]


def test_corrupt_xlsx_is_malformed():
    with pytest.raises(MalformedTable):
        read_list_upload("guests.xlsx", b"definitely not a zip archive")


def test_pdf_yields_one_text_per_page():
    kind, pages = read_list_upload("roster.pdf", _blank_pdf_bytes(2))
    assert kind is SourceKind.DOCUMENT
    assert len(pages) == 2
    assert all(isinstance(page, str) for page in pages)
    assert len(normalize(kind, pages)) == 2


def test_corrupt_pdf_is_malformed():
    with pytest.raises(MalformedTable):
        read_list_upload("roster.pdf", b"not a pdf at all")


def test_legacy_xls_is_unsupported():
    with pytest.raises(UnsupportedFormat) as excinfo:
        read_list_upload("guests.xls", b"\xd0\xcf\x11\xe0")
    assert ".xlsx" in excinfo.value.message


@pytest.mark.parametrize("filename", ["guests.docx", "guests.json", "guests"])
def test_other_extensions_are_unsupported(filename):
    with pytest.raises(UnsupportedFormat):
        read_list_upload(filename, b"{}")
