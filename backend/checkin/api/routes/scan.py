from fastapi import APIRouter, UploadFile, File, Depends, HTTPException
import logging
import time

from checkin.api.deps import get_controller, get_scanner
from checkin.core.config import settings
from checkin.core.exceptions import CapabilityUnavailable, DecodeFailure, SessionStateError
from checkin.models.scan import ScanOutcome
from checkin.models.schemas import DecodedScanRequest, ScanOutcomeResponse, SessionResponse
from checkin.services.scanner import PushScanCapability
from checkin.services.session import ScanSessionController

router = APIRouter()
logger = logging.getLogger(__name__)

def _outcome_response(controller: ScanSessionController, outcome: ScanOutcome) -> ScanOutcomeResponse:
    identifier = controller.matcher.identifier_of(outcome.record) if outcome.matched else None
    return ScanOutcomeResponse.from_outcome(outcome, identifier=identifier)

def _session_response(controller: ScanSessionController) -> SessionResponse:
    outcome = controller.outcome
    return SessionResponse(
        state=controller.state,
        registry_size=controller.registry.size,
        outcome=_outcome_response(controller, outcome) if outcome else None
    )

@router.get("/scan/session", response_model=SessionResponse)
async def session_status(controller: ScanSessionController = Depends(get_controller)):
    return _session_response(controller)

@router.post("/scan/start", response_model=SessionResponse)
async def start_scan(controller: ScanSessionController = Depends(get_controller)):
    """Activate the scanner for the next guest"""
    try:
        await controller.start()
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except CapabilityUnavailable as e:
        raise HTTPException(status_code=503, detail=e.message)
    return _session_response(controller)

@router.post("/scan/cancel", response_model=SessionResponse)
async def cancel_scan(controller: ScanSessionController = Depends(get_controller)):
    try:
        await controller.cancel()
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=e.message)
    return _session_response(controller)

@router.post("/scan/next", response_model=SessionResponse)
async def next_guest(controller: ScanSessionController = Depends(get_controller)):
    """Acknowledge the last result and scan again"""
    try:
        await controller.acknowledge()
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except CapabilityUnavailable as e:
        raise HTTPException(status_code=503, detail=e.message)
    return _session_response(controller)

@router.post("/scan/decoded", response_model=ScanOutcomeResponse)
async def decoded_scan(
    request: DecodedScanRequest,
    controller: ScanSessionController = Depends(get_controller),
    scanner: PushScanCapability = Depends(get_scanner)
):
    """
    Receive a payload decoded by the scanning device and
    return whether it belongs to a registered guest.
    """
    start_time = time.time()
    try:
        scanner.push(request.payload)
        outcome = await controller.wait_for_outcome()
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except CapabilityUnavailable as e:
        raise HTTPException(status_code=503, detail=e.message)

    processing_time = time.time() - start_time
    logger.info(f"Scan resolved: matched={outcome.matched} ({processing_time:.3f}s)")
    return _outcome_response(controller, outcome)

@router.post("/scan/image", response_model=ScanOutcomeResponse)
async def image_scan(
    photo: UploadFile = File(...),
    controller: ScanSessionController = Depends(get_controller)
):
    """Decode a QR code from an uploaded image and check it against the list"""
    if photo.content_type and photo.content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=400, detail=f"Unsupported image type: {photo.content_type}")

    content = await photo.read()
    try:
        outcome = await controller.submit_image(content)
    except DecodeFailure as e:
        raise HTTPException(status_code=422, detail=e.message)
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=e.message)

    return _outcome_response(controller, outcome)
