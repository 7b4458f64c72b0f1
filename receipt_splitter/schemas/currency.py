from pydantic import BaseModel, ConfigDict


class CurrencyInfo(BaseModel):
    model_config = ConfigDict(frozen=True)
    code: str
    name: str
    symbol: str
    locale: str
    minor_units: int  # decimal places, e.g. 2 for USD, 0 for JPY


class FormattedAmount(BaseModel):
    code: str
    amount: float
    formatted: str
