from typing import Iterable, Optional, Sequence
import logging

from checkin.core.config import settings
from checkin.core.messages import EMPTY_REGISTRY_SAMPLE, MISSING_SAMPLE_IDENTIFIER
from checkin.models.attendee import AttendeeRecord, RAW_CONTENT_FIELD
from checkin.models.scan import MatchRule, ScanOutcome, UnmatchedDiagnostic
from checkin.utils.identifiers import canon, candidate_identifier

logger = logging.getLogger(__name__)

class ScanMatchingService:
    def __init__(self, identifier_fields: Optional[Sequence[str]] = None):
        self.identifier_fields = tuple(identifier_fields or settings.IDENTIFIER_FIELDS)

    def identifier_of(self, record: AttendeeRecord) -> Optional[str]:
        return candidate_identifier(record, self.identifier_fields)

    def match_record(self, record: AttendeeRecord, decoded: str) -> Optional[MatchRule]:
        """
        Check one record against an already canon-ed payload.
        Returns the rule that matched, or None.
        """
        raw_id = self.identifier_of(record)
        raw_content = record.get(RAW_CONTENT_FIELD)
        if raw_id is None and not raw_content:
            return None

        clean_id = canon(raw_id)

        # An empty identifier would equal or contain anything vacuously
        if clean_id:
            if clean_id == decoded:
                return MatchRule.EXACT
            # Tolerates scanners that add prefixes/suffixes or drop characters.
            # Short IDs (e.g. "1") can false-positive here.
            if decoded in clean_id or clean_id in decoded:
                return MatchRule.SUBSTRING

        if raw_content and decoded in canon(raw_content):
            return MatchRule.FULL_TEXT

        return None

    def resolve(self, decoded_text: str, registry: Iterable[AttendeeRecord]) -> ScanOutcome:
        """
        Find the first record matching a decoded scan payload.
        Never raises: a miss is an Unmatched outcome with a diagnostic.
        """
        records = tuple(registry)
        decoded_text = "" if decoded_text is None else str(decoded_text)
        clean_decoded = canon(decoded_text)

        if clean_decoded:
            for index, record in enumerate(records):
                rule = self.match_record(record, clean_decoded)
                if rule is not None:
                    logger.info(f"Scan matched record #{index} via {rule.value} rule")
                    return ScanOutcome.matched_record(decoded_text, record, rule)

        diagnostic = UnmatchedDiagnostic(
            decoded_text=decoded_text,
            normalized_text=clean_decoded,
            registry_size=len(records),
            sample_identifier=self._sample_identifier(records),
        )
        logger.warning(f"Scan mismatch: scanned={decoded_text!r} normalized={clean_decoded!r} "
                       f"loaded={diagnostic.registry_size} sample={diagnostic.sample_identifier!r}")
        return ScanOutcome.unmatched(decoded_text, diagnostic)

    def _sample_identifier(self, records: Sequence[AttendeeRecord]) -> str:
        if not records:
            return EMPTY_REGISTRY_SAMPLE
        return self.identifier_of(records[0]) or MISSING_SAMPLE_IDENTIFIER

# Singleton instance
scan_matching_service = ScanMatchingService()
