"""Operator-facing advisory texts."""

DOCUMENT_MATCHING_NOTICE = (
    "PDF loaded. Note: PDF verification checks if the scanned ID exists "
    "anywhere in the document text."
)

ACTIVATION_FAILURE_MESSAGE = (
    "Failed to start camera. Please ensure permissions are granted."
)

DECODE_FAILURE_MESSAGE = (
    "No QR code could be read from the image. Please try a sharper photo."
)

EMPTY_REGISTRY_SAMPLE = "Empty List"
MISSING_SAMPLE_IDENTIFIER = "N/A"


def unmatched_message(decoded_text: str, normalized_text: str,
                      registry_size: int, sample_identifier: str) -> str:
    """Render the scan mismatch diagnostic"""
    return (
        "Scan Mismatch\n\n"
        f'Scanned: "{decoded_text}"\n'
        f'Normalized: "{normalized_text}"\n\n'
        f"Attendees Loaded: {registry_size}\n"
        f'Sample ID[0]: "{sample_identifier}"\n\n'
        "Please check for extra spaces or case differences."
    )
