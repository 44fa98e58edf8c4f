from fastapi import APIRouter, UploadFile, File, Depends, HTTPException
import logging

from checkin.api.deps import get_controller
from checkin.core.config import settings
from checkin.core.exceptions import MalformedTable, UnsupportedFormat
from checkin.models.schemas import AttendeeListResponse, IngestResponse, ManualListRequest
from checkin.services.normalizer import SourceKind
from checkin.services.readers import read_list_upload
from checkin.services.session import IngestResult, ScanSessionController

router = APIRouter()
logger = logging.getLogger(__name__)

def _ingest(controller: ScanSessionController, source_kind, raw_input) -> IngestResult:
    try:
        return controller.ingest(source_kind, raw_input)
    except UnsupportedFormat as e:
        logger.warning(f"List rejected: {e.message}")
        raise HTTPException(status_code=400, detail=e.message)
    except MalformedTable as e:
        logger.warning(f"List rejected: {e.message}")
        raise HTTPException(status_code=422, detail=e.message)

def _response(result: IngestResult) -> IngestResponse:
    return IngestResponse(
        status="success",
        source_kind=result.source_kind.value,
        total_loaded=result.total_loaded,
        advisory=result.advisory
    )

@router.post("/attendees/upload", response_model=IngestResponse)
async def upload_list(
    file: UploadFile = File(...),
    controller: ScanSessionController = Depends(get_controller)
):
    """
    Load the guest list from a CSV, Excel or PDF file.
    Replaces any previously loaded list.
    """
    content = await file.read()
    size_mb = len(content) / (1024 * 1024)
    if size_mb > settings.MAX_UPLOAD_SIZE_MB:
        raise HTTPException(
            status_code=413,
            detail=f"File too large: {size_mb:.2f}MB (max {settings.MAX_UPLOAD_SIZE_MB}MB)"
        )

    try:
        source_kind, raw_input = read_list_upload(file.filename, content)
    except UnsupportedFormat as e:
        raise HTTPException(status_code=400, detail=e.message)
    except MalformedTable as e:
        raise HTTPException(status_code=422, detail=e.message)

    result = _ingest(controller, source_kind, raw_input)
    logger.info(f"✅ Loaded {result.total_loaded} attendees from {file.filename}")
    return _response(result)

@router.post("/attendees/manual", response_model=IngestResponse)
async def paste_list(
    request: ManualListRequest,
    controller: ScanSessionController = Depends(get_controller)
):
    """Load a pasted list: CSV with a header row, or one ID per line"""
    result = _ingest(controller, SourceKind.FREE_TEXT, request.text)
    logger.info(f"✅ Loaded {result.total_loaded} attendees from pasted text")
    return _response(result)

@router.get("/attendees", response_model=AttendeeListResponse)
async def list_attendees(controller: ScanSessionController = Depends(get_controller)):
    return AttendeeListResponse(
        total=controller.registry.size,
        attendees=list(controller.registry.records)
    )

@router.delete("/attendees")
async def reset_list(controller: ScanSessionController = Depends(get_controller)):
    """Reset the master list and the scan session"""
    await controller.reset()
    return {"status": "success", "message": "Attendee list cleared"}
