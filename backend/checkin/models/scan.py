from dataclasses import dataclass
from enum import Enum
from typing import Optional

from checkin.models.attendee import AttendeeRecord
from checkin.core.messages import unmatched_message


class SessionState(str, Enum):
    IDLE = "idle"            # no registry yet
    READY = "ready"          # registry loaded, scanner inactive
    SCANNING = "scanning"    # scanner active, awaiting a decode
    RESOLVED = "resolved"    # outcome awaiting operator acknowledgment


class MatchRule(str, Enum):
    EXACT = "exact"
    SUBSTRING = "substring"
    FULL_TEXT = "full_text"


@dataclass(frozen=True)
class UnmatchedDiagnostic:
    decoded_text: str
    normalized_text: str
    registry_size: int
    sample_identifier: str

    @property
    def message(self) -> str:
        return unmatched_message(
            self.decoded_text,
            self.normalized_text,
            self.registry_size,
            self.sample_identifier,
        )


@dataclass(frozen=True)
class ScanOutcome:
    """Result of resolving one decoded payload: matched or unmatched"""
    decoded_text: str
    record: Optional[AttendeeRecord] = None
    rule: Optional[MatchRule] = None
    diagnostic: Optional[UnmatchedDiagnostic] = None

    @property
    def matched(self) -> bool:
        return self.record is not None

    @classmethod
    def matched_record(cls, decoded_text: str, record: AttendeeRecord,
                       rule: MatchRule) -> "ScanOutcome":
        return cls(decoded_text=decoded_text, record=record, rule=rule)

    @classmethod
    def unmatched(cls, decoded_text: str,
                  diagnostic: UnmatchedDiagnostic) -> "ScanOutcome":
        return cls(decoded_text=decoded_text, diagnostic=diagnostic)
