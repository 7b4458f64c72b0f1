from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from receipt_splitter.core.config import settings
from receipt_splitter.schemas.assignment import EqualSharesRequest, EqualSharesResponse
from receipt_splitter.schemas.calculation import CalculateRequest, CalculateResponse
from receipt_splitter.schemas.split import SharedSplitData, ShareRequest, ShareResponse, SplitValidationResult
from receipt_splitter.services.assignment_service import (
    build_assignment_map, equal_split_shares, get_unassigned_items, validate_item_assignments,
)
from receipt_splitter.services.calculation_service import calculate_person_totals
from receipt_splitter.services.split_sharing_service import (
    SplitDataValidationError, deserialize_split_data, generate_shareable_url,
    validate_split_data_detailed,
)
from receipt_splitter.services.validation_service import validate_receipt_invariants

router = APIRouter(tags=["splits"])


class SharedSplitResponse(BaseModel):
    split: SharedSplitData
    validation: SplitValidationResult


@router.post("/api/splits/calculate", response_model=CalculateResponse)
async def calculate_split(body: CalculateRequest):
    assignments = build_assignment_map(body.assignments)
    people = calculate_person_totals(body.receipt, body.people, assignments)
    return CalculateResponse(
        people=people,
        unassigned_items=get_unassigned_items(body.receipt, assignments),
        is_fully_assigned=validate_item_assignments(body.receipt, assignments),
        validation=validate_receipt_invariants(body.receipt, assignments, people),
    )


@router.post("/api/splits/equal-shares", response_model=EqualSharesResponse)
async def equal_shares(body: EqualSharesRequest):
    try:
        return EqualSharesResponse(shares=equal_split_shares(body.person_ids))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/api/splits/share", response_model=ShareResponse)
async def share_split(body: ShareRequest):
    base_url = body.base_url or settings.share_base_url
    try:
        url = generate_shareable_url(base_url, body.people, body.note, body.phone, body.date)
    except SplitDataValidationError as e:
        raise HTTPException(status_code=422, detail={
            "message": str(e),
            "errors": [code.value for code in e.errors],
            "error_messages": e.error_messages,
        })
    return ShareResponse(url=url)


@router.get("/api/splits/shared", response_model=SharedSplitResponse)
async def read_shared_split(request: Request):
    """Decode the query string of a shared link exactly as the link carries it."""
    split = deserialize_split_data(request.query_params)
    if split is None:
        raise HTTPException(status_code=400, detail="Invalid or incomplete split link")
    return SharedSplitResponse(split=split, validation=validate_split_data_detailed(split))
