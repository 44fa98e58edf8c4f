from typing import Dict, Optional

# A record has no fixed schema: keys come from the source's own headers
AttendeeRecord = Dict[str, Optional[str]]

RAW_CONTENT_FIELD = "raw_content"
DISPLAY_NAME_FIELD = "display_name"
FALLBACK_ID_FIELD = "registration_id"
FALLBACK_NAME_FIELD = "attendee_name"

def display_name_of(record: AttendeeRecord) -> Optional[str]:
    return record.get(DISPLAY_NAME_FIELD) or record.get(FALLBACK_NAME_FIELD)
