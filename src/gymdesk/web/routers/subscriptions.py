"""Subscription routes."""

from fastapi import APIRouter, Request

from ...schemas import SubscriptionCreate
from ...services import MemberService, PaymentService
from . import get_db_path

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.post("", status_code=201)
async def create_subscription(request: Request, data: SubscriptionCreate):
    subscription = await MemberService(get_db_path(request)).create_subscription(data)
    return subscription.to_dict()


@router.get("/{subscription_id}")
async def get_subscription(request: Request, subscription_id: int):
    subscription = await MemberService(get_db_path(request)).get_subscription(subscription_id)
    return {**subscription.to_dict(), "remaining_sessions": subscription.remaining_sessions}


@router.get("/{subscription_id}/balance")
async def get_balance(request: Request, subscription_id: int):
    balance = await PaymentService(get_db_path(request)).get_balance_info(subscription_id)
    return balance.to_dict()


@router.get("/{subscription_id}/payments")
async def get_subscription_payments(request: Request, subscription_id: int):
    service = PaymentService(get_db_path(request))
    balance = await service.get_balance_info(subscription_id)
    payments = await service.get_subscription_payments(subscription_id)
    return {"payments": [p.to_dict() for p in payments], "balance": balance.to_dict()}
