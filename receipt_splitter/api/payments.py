from fastapi import APIRouter, HTTPException

from receipt_splitter.schemas.payment import VenmoLinkRequest, VenmoLinkResponse
from receipt_splitter.services.payment_service import format_venmo_note, generate_venmo_link

router = APIRouter(tags=["payments"])


@router.post("/api/payments/venmo-link", response_model=VenmoLinkResponse)
async def venmo_link(body: VenmoLinkRequest):
    note = format_venmo_note(body.note, body.person_name)
    url = generate_venmo_link(body.phone, body.amount, note)
    if url is None:
        raise HTTPException(status_code=400, detail="Invalid payment parameters")
    return VenmoLinkResponse(url=url, note=note)
