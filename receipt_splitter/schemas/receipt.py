from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_CURRENCY = "USD"


class ReceiptItem(BaseModel):
    model_config = ConfigDict(frozen=True)
    name: str
    price: float
    quantity: float = 1

    @field_validator("quantity", mode="before")
    @classmethod
    def default_quantity(cls, v):
        # OCR output often omits quantity for single items
        return 1 if v is None else v


class Receipt(BaseModel):
    model_config = ConfigDict(frozen=True)
    restaurant: str | None = None
    date: str | None = None
    subtotal: float
    tax: float = 0
    tip: float | None = None
    total: float
    currency: str = DEFAULT_CURRENCY
    items: list[ReceiptItem] = []

    @field_validator("items", mode="before")
    @classmethod
    def drop_null_items(cls, v):
        if v is None:
            return []
        return [
            item for item in v
            if item is not None
            and not (isinstance(item, dict) and item.get("price") is None)
        ]

    @field_validator("tax", mode="before")
    @classmethod
    def default_tax(cls, v):
        return 0 if v is None else v

    @field_validator("currency", mode="before")
    @classmethod
    def normalize_currency(cls, v):
        if not v:
            return DEFAULT_CURRENCY
        return str(v).strip().upper()
