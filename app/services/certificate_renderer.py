"""Fixed-layout PDF certificate rendering.

The renderer is a pure function of its three labels: same inputs, same bytes
(the canvas runs in reportlab's ``invariant`` mode so no timestamp or random
document id leaks into the output).
"""

from __future__ import annotations

import io

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 50
BORDER_COLOR = HexColor("#2C3E50")
ACCENT_COLOR = HexColor("#2980B9")
SIGNATURE_LABEL = "Authorized Signature"


def _draw_centered_block(pdf: canvas.Canvas, text: str, font: str, size: int, y: float) -> float:
    """Draw ``text`` centred, wrapping long values; return the next baseline."""
    lines = simpleSplit(text, font, size, PAGE_WIDTH - 4 * MARGIN) or [""]
    pdf.setFont(font, size)
    for line in lines:
        pdf.drawCentredString(PAGE_WIDTH / 2, y, line)
        y -= size * 1.3
    return y


def render_certificate(person_label: str, title_label: str, date_label: str) -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4, invariant=1)
    pdf.setTitle(f"Certificate of Completion - {title_label}")

    pdf.setStrokeColor(BORDER_COLOR)
    pdf.setLineWidth(2)
    pdf.rect(MARGIN, MARGIN, PAGE_WIDTH - 2 * MARGIN, PAGE_HEIGHT - 2 * MARGIN)

    y = PAGE_HEIGHT - 160
    pdf.setFillColor(ACCENT_COLOR)
    y = _draw_centered_block(pdf, "CERTIFICATE OF COMPLETION", "Helvetica-Bold", 30, y)

    pdf.setFillColor(BORDER_COLOR)
    y -= 40
    y = _draw_centered_block(pdf, "This is to certify that", "Helvetica", 16, y)

    y -= 25
    y = _draw_centered_block(pdf, person_label, "Helvetica-Bold", 24, y)

    y -= 25
    y = _draw_centered_block(pdf, "has successfully completed the course", "Helvetica", 16, y)

    y -= 15
    pdf.setFillColor(ACCENT_COLOR)
    y = _draw_centered_block(pdf, title_label, "Helvetica-Bold", 20, y)

    pdf.setFillColor(BORDER_COLOR)
    y -= 25
    _draw_centered_block(pdf, f"Completed on: {date_label}", "Helvetica", 14, y)

    signature_y = MARGIN + 110
    pdf.setLineWidth(1)
    pdf.line(MARGIN + 50, signature_y, MARGIN + 230, signature_y)
    pdf.setFont("Helvetica", 12)
    pdf.drawString(MARGIN + 50, signature_y - 18, SIGNATURE_LABEL)

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()
