"""QR image validation and decoding tests."""

import io

import cv2
import pytest
from PIL import Image

from checkin.core.exceptions import DecodeFailure
from checkin.core.messages import DECODE_FAILURE_MESSAGE
from checkin.utils.image import decode_qr_image, validate_image


def _png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def _qr_png_bytes(payload: str) -> bytes:
    encoder = cv2.QRCodeEncoder.create()
    modules = encoder.encode(payload)
    scaled = cv2.resize(modules, None, fx=10, fy=10, interpolation=cv2.INTER_NEAREST)
    padded = cv2.copyMakeBorder(scaled, 40, 40, 40, 40, cv2.BORDER_CONSTANT, value=255)
    ok, encoded = cv2.imencode(".png", padded)
    assert ok
    return encoded.tobytes()


def test_validate_accepts_png():
    assert validate_image(_png_bytes(Image.new("RGB", (64, 64), "white"))) == (True, None)


def test_validate_rejects_empty():
    assert validate_image(b"") == (False, "Empty image file")


def test_validate_rejects_non_images():
    is_valid, error = validate_image(b"plain text, not pixels")
    assert not is_valid
    assert error == "Invalid image format"


def test_validate_rejects_oversized():
    is_valid, error = validate_image(b"\x00" * 2048, max_size_mb=0.001)
    assert not is_valid
    assert error.startswith("Image too large")


def test_validate_rejects_unsupported_format():
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8)).save(buffer, format="BMP")
    is_valid, error = validate_image(buffer.getvalue())
    assert not is_valid
    assert "BMP" in error


def test_blank_image_is_a_decode_failure():
    with pytest.raises(DecodeFailure) as excinfo:
        decode_qr_image(_png_bytes(Image.new("RGB", (200, 200), "white")))
    assert excinfo.value.message == DECODE_FAILURE_MESSAGE


def test_garbage_bytes_are_a_decode_failure():
    with pytest.raises(DecodeFailure):
        decode_qr_image(b"\x89PNG but truncated")


@pytest.mark.skipif(not hasattr(cv2, "QRCodeEncoder"), reason="OpenCV built without QR encoder")
def test_decodes_generated_qr_code():
    assert decode_qr_image(_qr_png_bytes("A100")) == "A100"

