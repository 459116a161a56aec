"""Decoder for the openFPGA binary image format.

Icons and platform images are stored as little-endian 16-bit words, one per
pixel, with the whole image rotated 90 degrees counter-clockwise. Only the
high byte carries the pixel brightness.
"""

from __future__ import annotations

from PIL import Image

from coreinventory.core.exceptions import ImageDecodeError


BYTES_PER_PIXEL = 2


def decode_binary_image(data: bytes, width: int, height: int) -> Image.Image:
    """Decode a raw binary image into an upright grayscale image.

    Args:
        data: Raw file contents.
        width: Width of the upright image in pixels.
        height: Height of the upright image in pixels.

    Returns:
        A Pillow image in "L" mode with size (width, height).

    Raises:
        ImageDecodeError: If the payload size does not match the dimensions.
    """
    expected = width * height * BYTES_PER_PIXEL
    if len(data) != expected:
        raise ImageDecodeError(
            f"Expected {expected} bytes for a {width}x{height} image, got {len(data)}"
        )

    brightness = data[1::BYTES_PER_PIXEL]
    # Stored rotated, so the raster is height pixels wide and width pixels tall
    rotated = Image.frombytes("L", (height, width), brightness)
    return rotated.transpose(Image.Transpose.ROTATE_270)
