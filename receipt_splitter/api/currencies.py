from fastapi import APIRouter

from receipt_splitter.schemas.currency import CurrencyInfo, FormattedAmount
from receipt_splitter.utils.currency_utils import format_currency, get_currency_info, get_supported_currencies

router = APIRouter(tags=["currencies"])


@router.get("/api/currencies", response_model=list[CurrencyInfo])
async def list_currencies():
    return get_supported_currencies()


@router.get("/api/currencies/{code}", response_model=CurrencyInfo)
async def currency_info(code: str):
    # unknown codes resolve to USD rather than 404
    return get_currency_info(code)


@router.get("/api/currencies/{code}/format", response_model=FormattedAmount)
async def format_amount(code: str, amount: float):
    info = get_currency_info(code)
    return FormattedAmount(code=info.code, amount=amount, formatted=format_currency(amount, info.code))
