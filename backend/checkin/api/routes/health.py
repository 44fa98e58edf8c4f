from fastapi import APIRouter, Depends
import logging

from checkin.api.deps import get_controller
from checkin.core.config import settings
from checkin.services.session import ScanSessionController

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/health")
async def health_check(controller: ScanSessionController = Depends(get_controller)):
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "attendee-checkin",
        "version": settings.VERSION,
        "session_state": controller.state.value,
        "attendees_loaded": controller.registry.size
    }
