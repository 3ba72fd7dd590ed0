"""
QR code rendering for provisioning URIs.
"""

import base64
import io

import qrcode
import qrcode.constants


def render_qr_png(uri: str) -> bytes:
    """
    Render a provisioning URI as a PNG QR code.

    Args:
        uri: otpauth:// URI

    Returns:
        PNG image bytes
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=8,
        border=4,
    )
    qr.add_data(uri)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def render_qr_data_url(uri: str) -> str:
    """Render a provisioning URI as a data:image/png;base64 URL for an <img> tag."""
    encoded = base64.b64encode(render_qr_png(uri)).decode("ascii")
    return f"data:image/png;base64,{encoded}"
