from typing import Any, Mapping, Optional, Sequence

# Default priority table; deployments override it via settings.IDENTIFIER_FIELDS
IDENTIFIER_FIELDS = ("registration_id", "RegistrationID", "registration_ID", "id")

def canon(value: Any) -> str:
    """Canonical form used for every identifier comparison"""
    if value is None:
        return ""
    return str(value).strip().lower()

def candidate_identifier(
    record: Mapping[str, Any],
    fields: Sequence[str] = IDENTIFIER_FIELDS
) -> Optional[str]:
    """
    Return the first populated identifier field of a record.
    Empty strings count as absent.
    """
    for field in fields:
        value = record.get(field)
        if value is not None and value != "":
            return str(value)
    return None
