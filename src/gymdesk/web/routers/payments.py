"""Payment and refund routes."""

from datetime import date

from fastapi import APIRouter, Request
from fastapi.responses import Response

from ...schemas import PaymentCreate, RefundCreate
from ...services import PaymentService
from . import get_db_path

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("", status_code=201)
async def record_payment(request: Request, data: PaymentCreate):
    payment = await PaymentService(get_db_path(request)).record_payment(data)
    return payment.to_dict()


@router.get("/stats")
async def payment_stats(request: Request, start_date: date, end_date: date):
    """Revenue statistics for payments dated within [start_date, end_date]."""
    stats = await PaymentService(get_db_path(request)).get_payment_stats(start_date, end_date)
    return {
        "start_date": start_date.isoformat(),
        "end_date": end_date.isoformat(),
        **stats.to_dict(),
    }


@router.get("/{payment_id}")
async def get_payment(request: Request, payment_id: int):
    history = await PaymentService(get_db_path(request)).get_refund_history(payment_id)
    return history.payment.to_dict()


@router.post("/{payment_id}/refund", status_code=201)
async def refund_payment(request: Request, payment_id: int, data: RefundCreate):
    service = PaymentService(get_db_path(request))
    refund = await service.process_refund(payment_id, data.refund_amount, data.reason)
    history = await service.get_refund_history(payment_id)
    return {"refund": refund.to_dict(), "history": history.to_dict()}


@router.get("/{payment_id}/refunds")
async def refund_history(request: Request, payment_id: int):
    history = await PaymentService(get_db_path(request)).get_refund_history(payment_id)
    return history.to_dict()


@router.get("/{payment_id}/receipt.pdf")
async def payment_receipt(request: Request, payment_id: int):
    """PDF receipt for a payment or a refund."""
    pdf, filename = await PaymentService(get_db_path(request)).render_receipt(payment_id)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
