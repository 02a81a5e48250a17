from __future__ import annotations

import io

import qrcode
from PIL import Image, ImageDraw, ImageFont

QR_WIDTH = 256
LABEL_STRIP = 30
DOWNLOAD_NAME = "qrcode.png"


def render_labeled_qr(code: str, *, width: int = QR_WIDTH, strip: int = LABEL_STRIP) -> bytes:
    """PNG of the QR for `code` with a strip below reading 'QR Code: <code>'."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(code)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white").get_image().convert("RGB")
    img = img.resize((width, width), Image.NEAREST)

    canvas = Image.new("RGB", (width, width + strip), "white")
    canvas.paste(img, (0, 0))

    draw = ImageDraw.Draw(canvas)
    font = ImageFont.load_default()
    label = f"QR Code: {code}"
    left, top, right, bottom = draw.textbbox((0, 0), label, font=font)
    x = (width - (right - left)) / 2
    y = width + (strip - (bottom - top)) / 2 - top
    draw.text((x, y), label, fill="black", font=font)

    buf = io.BytesIO()
    canvas.save(buf, format="PNG")
    return buf.getvalue()
