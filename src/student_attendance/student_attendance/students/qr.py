from __future__ import annotations

import io

import qrcode


def render_qr_png(value: str, *, box_size: int = 10, border: int = 2) -> bytes:
    """Render `value` (a student's phone, the scan key) as a PNG QR code."""

    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=box_size,
        border=border,
    )
    qr.add_data(value)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
