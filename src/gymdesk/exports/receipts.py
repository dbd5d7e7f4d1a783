"""PDF receipts for payments and refunds."""

from datetime import datetime
from io import BytesIO

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from ..models.member import Member
from ..models.payment import Payment, RefundHistory

STUDIO_NAME = "gymdesk studio"


def receipt_filename(payment: Payment) -> str:
    return f"receipt-{payment.receipt_number or payment.id}.pdf"


def _method_label(payment: Payment) -> str:
    return payment.payment_method.value.replace("_", " ").title()


def build_receipt_pdf(
    payment: Payment,
    member: Member | None = None,
    history: RefundHistory | None = None,
    original: Payment | None = None,
) -> bytes:
    """Render a one-page receipt.

    For a refund row, pass the ``original`` payment and its ``history`` to
    print the original receipt number, total refunded and net amount.
    For an original payment, ``history`` adds its refund summary.
    """
    buf = BytesIO()
    page_w, page_h = A4
    c = canvas.Canvas(buf, pagesize=A4)
    margin = 56
    y = page_h - margin

    title = "REFUND RECEIPT" if payment.is_refund else "PAYMENT RECEIPT"
    c.setFillColor(HexColor("#2563EB"))
    c.setFont("Helvetica-Bold", 18)
    c.drawString(margin, y, f"{STUDIO_NAME} - {title}")
    y -= 30

    c.setFillColor(HexColor("#111827"))
    c.setFont("Helvetica", 12)

    lines = [
        ("Receipt", payment.receipt_number or "-"),
        ("Date", payment.payment_date.strftime("%Y-%m-%d %H:%M") if payment.payment_date else "-"),
    ]
    if member is not None:
        lines.append(("Member", f"{member.full_name} <{member.email}>"))
    if payment.plan_name:
        lines.append(("Plan", payment.plan_name))
    lines.append(("Method", _method_label(payment)))
    if payment.reference_number:
        lines.append(("Reference", payment.reference_number))

    if payment.is_refund:
        lines.append(("Refund amount", f"${-payment.amount:.2f}"))
        if payment.refund_reason:
            lines.append(("Reason", payment.refund_reason))
        if original is not None:
            lines.append(("Original receipt", original.receipt_number or "-"))
            lines.append(("Original amount", f"${original.amount:.2f}"))
    else:
        lines.append(("Amount", f"${payment.amount:.2f}"))

    if history is not None:
        lines.append(("Total refunded", f"${history.total_refunded:.2f}"))
        lines.append(("Net amount", f"${history.net_amount:.2f}"))

    for label, value in lines:
        c.setFont("Helvetica-Bold", 12)
        c.drawString(margin, y, f"{label}:")
        c.setFont("Helvetica", 12)
        c.drawString(margin + 130, y, str(value))
        y -= 20

    c.setFillColor(HexColor("#6B7280"))
    c.setFont("Helvetica-Oblique", 10)
    c.drawString(margin, margin, f"Issued: {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    c.showPage()
    c.save()
    buf.seek(0)
    return buf.read()
