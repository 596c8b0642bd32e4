from __future__ import annotations

import io
import secrets

import qrcode

from ..core.constants import QR_CODE_BYTES


def new_qr_code() -> str:
    """Random, URL-safe code a lesson's QR image encodes."""
    return secrets.token_urlsafe(QR_CODE_BYTES)


def render_qr_png(data: str) -> io.BytesIO:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf
