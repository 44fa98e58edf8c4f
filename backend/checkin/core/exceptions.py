"""Error taxonomy for ingestion, scanning and session sequencing.

Every error carries a plain-text ``message`` that can be shown to the
operator as-is.
"""


class CheckinError(Exception):
    """Base class for all check-in errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedFormat(CheckinError):
    """Ingestion was given a source kind (or file type) it cannot read"""


class MalformedTable(CheckinError):
    """Ingestion produced zero usable records"""


class CapabilityUnavailable(CheckinError):
    """The scan capability could not be activated"""


class DecodeFailure(CheckinError):
    """An image did not contain a decodable QR code"""


class SessionStateError(CheckinError):
    """Operation not allowed in the current session state"""
