import io

from PIL import Image

from school_appointments.booking.qr import LABEL_STRIP, QR_WIDTH, render_labeled_qr


def test_png_has_the_qr_and_a_label_strip():
    png = render_labeled_qr("ABC123")

    image = Image.open(io.BytesIO(png))
    assert image.format == "PNG"
    assert image.size == (QR_WIDTH, QR_WIDTH + LABEL_STRIP)


def test_label_strip_is_white_at_the_edges():
    image = Image.open(io.BytesIO(render_labeled_qr("ABC123"))).convert("RGB")

    assert image.getpixel((0, QR_WIDTH + 1)) == (255, 255, 255)
    assert image.getpixel((QR_WIDTH - 1, QR_WIDTH + LABEL_STRIP - 1)) == (255, 255, 255)


def test_different_codes_give_different_images():
    assert render_labeled_qr("ABC123") != render_labeled_qr("XYZ789")
