import enum

from pydantic import BaseModel


class InvariantViolation(str, enum.Enum):
    negative_subtotal = "NEGATIVE_SUBTOTAL"
    negative_tax = "NEGATIVE_TAX"
    negative_tip = "NEGATIVE_TIP"
    negative_total = "NEGATIVE_TOTAL"
    negative_item_price = "NEGATIVE_ITEM_PRICE"
    negative_item_quantity = "NEGATIVE_ITEM_QUANTITY"
    items_subtotal_mismatch = "ITEMS_SUBTOTAL_MISMATCH"
    item_splits_mismatch = "ITEM_SPLITS_MISMATCH"
    negative_person_total = "NEGATIVE_PERSON_TOTAL"
    negative_person_tax = "NEGATIVE_PERSON_TAX"
    negative_person_tip = "NEGATIVE_PERSON_TIP"
    negative_person_final_total = "NEGATIVE_PERSON_FINAL_TOTAL"
    negative_person_item_amount = "NEGATIVE_PERSON_ITEM_AMOUNT"


class ReceiptValidationError(BaseModel):
    type: InvariantViolation
    message: str
    item_id: str | None = None
    item_name: str | None = None
    expected: float | None = None
    actual: float | None = None
    diff: float | None = None
    tolerance: float | None = None


class ReceiptValidationResult(BaseModel):
    is_valid: bool
    errors: list[ReceiptValidationError] = []
