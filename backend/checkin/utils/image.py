from PIL import Image, UnidentifiedImageError
import cv2
import io
import logging
import numpy as np
from typing import Optional

from checkin.core.config import settings
from checkin.core.exceptions import DecodeFailure
from checkin.core.messages import DECODE_FAILURE_MESSAGE

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ('JPEG', 'PNG', 'WEBP')

def validate_image(image_bytes: bytes, max_size_mb: Optional[int] = None) -> tuple:
    """
    Validate image file
    Returns (is_valid, error_message)
    """
    if max_size_mb is None:
        max_size_mb = settings.MAX_UPLOAD_SIZE_MB

    if not image_bytes:
        return False, "Empty image file"

    # Check size
    size_mb = len(image_bytes) / (1024 * 1024)
    if size_mb > max_size_mb:
        return False, f"Image too large: {size_mb:.2f}MB (max {max_size_mb}MB)"

    try:
        image = Image.open(io.BytesIO(image_bytes))
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Image validation error: {str(e)}")
        return False, "Invalid image format"

    # Check format
    if image.format not in SUPPORTED_FORMATS:
        return False, f"Unsupported format: {image.format}"

    return True, None

def decode_qr_image(image_bytes: bytes) -> str:
    """
    Decode the QR code in an uploaded image.
    Raises DecodeFailure when the image is unusable or holds no readable code.
    """
    is_valid, error = validate_image(image_bytes)
    if not is_valid:
        logger.warning(f"QR image rejected: {error}")
        raise DecodeFailure(DECODE_FAILURE_MESSAGE)

    nparr = np.frombuffer(image_bytes, np.uint8)
    image = cv2.imdecode(nparr, cv2.IMREAD_COLOR)
    if image is None:
        raise DecodeFailure(DECODE_FAILURE_MESSAGE)

    detector = cv2.QRCodeDetector()
    decoded_text, points, _ = detector.detectAndDecode(image)

    if not decoded_text:
        # Retry on grayscale
        gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        decoded_text, points, _ = detector.detectAndDecode(gray)

    if not decoded_text:
        logger.info("No QR code found in uploaded image")
        raise DecodeFailure(DECODE_FAILURE_MESSAGE)

    logger.info(f"Decoded QR image payload ({len(decoded_text)} chars)")
    return decoded_text
