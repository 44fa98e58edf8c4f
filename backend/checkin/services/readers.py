import io
import logging
from pathlib import Path
from typing import Any, List, Tuple

from openpyxl import load_workbook
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from checkin.core.config import settings
from checkin.core.exceptions import MalformedTable, UnsupportedFormat
from checkin.services.normalizer import SourceKind

logger = logging.getLogger(__name__)

def file_extension(filename: str) -> str:
    return Path(filename or "").suffix.lower().lstrip(".")

def read_delimited_bytes(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise MalformedTable("CSV file is not valid UTF-8 text")

def read_first_sheet(content: bytes) -> List[Tuple[Any, ...]]:
    """Cell values of the first worksheet; other sheets are ignored"""
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except Exception as e:
        logger.error(f"Spreadsheet read error: {str(e)}")
        raise MalformedTable("Could not read the spreadsheet file")

    try:
        sheet = workbook.worksheets[0]
        if len(workbook.worksheets) > 1:
            logger.info(f"Workbook has {len(workbook.worksheets)} sheets, reading '{sheet.title}' only")
        return [tuple(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()

def read_pdf_pages(content: bytes) -> List[str]:
    """Extracted text per page, in page order"""
    try:
        reader = PdfReader(io.BytesIO(content))
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PyPdfError, ValueError) as e:
        logger.error(f"Error reading PDF: {str(e)}")
        raise MalformedTable("Failed to parse PDF file.")

    logger.info(f"Extracted text from {len(pages)} PDF page(s)")
    return pages

def read_list_upload(filename: str, content: bytes) -> Tuple[SourceKind, Any]:
    """
    Materialize an uploaded guest list for the normalizer.
    Returns (source_kind, raw_input).
    """
    extension = file_extension(filename)

    if extension == "xls":
        raise UnsupportedFormat("Legacy .xls files are not supported. Save the sheet as .xlsx or .csv.")

    if extension not in settings.ALLOWED_LIST_EXTENSIONS:
        raise UnsupportedFormat(f"Unsupported file type: .{extension or '?'}. "
                                f"Allowed: {', '.join(settings.ALLOWED_LIST_EXTENSIONS)}")

    if extension == "csv":
        return SourceKind.DELIMITED, read_delimited_bytes(content)
    if extension in ("xlsx", "xlsm"):
        return SourceKind.SPREADSHEET, read_first_sheet(content)
    if extension == "pdf":
        return SourceKind.DOCUMENT, read_pdf_pages(content)

    raise UnsupportedFormat(f"No reader registered for .{extension} files")
