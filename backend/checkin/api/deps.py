from fastapi import Request

from checkin.services.scanner import PushScanCapability
from checkin.services.session import ScanSessionController

def get_controller(request: Request) -> ScanSessionController:
    """Dependency for the process-wide scan session"""
    return request.app.state.controller

def get_scanner(request: Request) -> PushScanCapability:
    """Dependency for the device-facing scanner"""
    return request.app.state.scanner
