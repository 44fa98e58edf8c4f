from pydantic import BaseModel
from typing import Dict, List, Optional

from checkin.models.scan import ScanOutcome, SessionState
from checkin.models.attendee import display_name_of

class ManualListRequest(BaseModel):
    text: str  # pasted list: CSV with a header, or one ID per line

class DecodedScanRequest(BaseModel):
    payload: str  # the decoded QR text

class IngestResponse(BaseModel):
    status: str
    source_kind: str
    total_loaded: int
    advisory: Optional[str] = None

class AttendeeListResponse(BaseModel):
    total: int
    attendees: List[Dict[str, Optional[str]]]

class ScanOutcomeResponse(BaseModel):
    status: str  # "MATCHED" or "UNMATCHED"
    decoded_text: str
    matched_by: Optional[str] = None
    display_name: Optional[str] = None
    identifier: Optional[str] = None
    attendee: Optional[Dict[str, Optional[str]]] = None
    registry_size: Optional[int] = None
    sample_identifier: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: ScanOutcome, identifier: Optional[str] = None) -> "ScanOutcomeResponse":
        if outcome.matched:
            return cls(
                status="MATCHED",
                decoded_text=outcome.decoded_text,
                matched_by=outcome.rule.value if outcome.rule else None,
                display_name=display_name_of(outcome.record),
                identifier=identifier,
                attendee=outcome.record,
            )
        diagnostic = outcome.diagnostic
        return cls(
            status="UNMATCHED",
            decoded_text=outcome.decoded_text,
            registry_size=diagnostic.registry_size if diagnostic else None,
            sample_identifier=diagnostic.sample_identifier if diagnostic else None,
            message=diagnostic.message if diagnostic else None,
        )

class SessionResponse(BaseModel):
    state: SessionState
    registry_size: int
    outcome: Optional[ScanOutcomeResponse] = None
