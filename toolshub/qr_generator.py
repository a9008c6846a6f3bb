"""PNG QR codes for short links."""
import io
from typing import NamedTuple

import qrcode
from qrcode.image.pil import PilImage

from .errors import InvalidInputError


class QrSize(NamedTuple):
    box_size: int  # pixels per module
    border: int  # quiet zone, in modules


QR_SIZES = {
    "small": QrSize(box_size=4, border=2),
    "medium": QrSize(box_size=6, border=3),
    "large": QrSize(box_size=8, border=4),
}


def render_qr_png(data: str, size: str = "medium") -> bytes:
    """
    Encode ``data`` as a QR code and return PNG bytes.

    The symbol version grows with the length of ``data``, so the image gets
    wider for long links. Unknown sizes raise InvalidInputError.
    """
    if size not in QR_SIZES:
        raise InvalidInputError(f"Unknown QR code size: {size}")
    box_size, border = QR_SIZES[size]

    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)

    image: PilImage = qr.make_image(image_factory=PilImage, fill_color="black", back_color="white")
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
