"""Member routes."""

from fastapi import APIRouter, Request

from ...schemas import MemberCreate
from ...services import MemberService, PaymentService
from . import get_db_path

router = APIRouter(prefix="/members", tags=["members"])


@router.post("", status_code=201)
async def create_member(request: Request, data: MemberCreate):
    member = await MemberService(get_db_path(request)).create_member(data)
    return member.to_dict()


@router.get("")
async def list_members(request: Request, search: str | None = None):
    members = await MemberService(get_db_path(request)).list_members(search)
    return {"members": [m.to_dict() for m in members], "count": len(members)}


@router.get("/{member_id}")
async def get_member(request: Request, member_id: int):
    service = MemberService(get_db_path(request))
    member = await service.get_member(member_id)
    subscriptions = await service.get_member_subscriptions(member_id)
    return {**member.to_dict(), "subscriptions": [s.to_dict() for s in subscriptions]}


@router.get("/{member_id}/payments")
async def get_member_payments(request: Request, member_id: int):
    """All payments and refunds of a member, newest first."""
    await MemberService(get_db_path(request)).get_member(member_id)
    payments = await PaymentService(get_db_path(request)).get_member_payments(member_id)
    return {"payments": [p.to_dict() for p in payments]}
