from __future__ import annotations

from typing import BinaryIO

from PIL import Image, UnidentifiedImageError

from ..core.exceptions import DecodeError


def decode_qr_image(stream: BinaryIO) -> str:
    """Return the text of the first QR code found in an uploaded image."""

    try:
        img = Image.open(stream).convert("RGB")
    except (UnidentifiedImageError, OSError) as e:
        raise DecodeError("Failed to process QR code image") from e

    # pyzbar binds libzbar when imported; load it only once an image is in hand.
    from pyzbar.pyzbar import decode as pyzbar_decode

    decoded = pyzbar_decode(img)
    if not decoded:
        raise DecodeError("Failed to decode QR code from image. Please try a clearer image.")

    try:
        return decoded[0].data.decode("utf-8").strip()
    except UnicodeDecodeError as e:
        raise DecodeError("QR code does not contain text") from e
