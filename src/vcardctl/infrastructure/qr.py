"""QR barcode encoding and PNG output for serialized vCard text.

Thin wrapper over the ``qrcode`` library (Pillow image factory). The
caller hands in already-serialized text; encoding errors from ``qrcode``
propagate unchanged.
"""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

import qrcode
import qrcode.constants
from PIL import Image

logger = logging.getLogger(__name__)

ERROR_CORRECTION_LEVELS: dict[str, int] = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}


def encode_qr(
    text: str,
    width: int,
    height: int,
    *,
    error_correction: str = "M",
    border: int = 4,
) -> Image.Image:
    """Encode *text* as a QR code scaled to ``width`` x ``height`` pixels.

    The version (module count) is picked automatically to fit the data.

    Raises:
        ValueError: Unknown error-correction level, or the requested size
            is smaller than the code itself. qrcode 8 also raises ValueError
            when the data does not fit the largest QR version.
        DataOverflowError: The data does not fit (qrcode 7).
    """
    level = ERROR_CORRECTION_LEVELS.get(error_correction.upper())
    if level is None:
        msg = f"Unknown error correction level {error_correction!r} (expected L, M, Q or H)"
        raise ValueError(msg)

    code = qrcode.QRCode(version=None, error_correction=level, box_size=1, border=border)
    code.add_data(text)
    code.make(fit=True)

    size = code.modules_count + 2 * border
    if width < size or height < size:
        msg = f"QR code too big: needs at least {size}x{size} pixels, got {width}x{height}"
        raise ValueError(msg)

    image = code.make_image(fill_color="black", back_color="white").get_image()
    logger.debug("Encoded %d chars as %dx%d QR modules", len(text), size, size)
    return image.convert("L").resize((width, height), Image.Resampling.NEAREST)


def png_bytes(image: Image.Image) -> bytes:
    """Return *image* encoded as PNG bytes."""
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def write_png(image: Image.Image, path: Path) -> int:
    """Write *image* to *path* as PNG and return the number of bytes written."""
    data = png_bytes(image)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return len(data)
