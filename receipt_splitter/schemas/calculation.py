from pydantic import BaseModel

from receipt_splitter.schemas.assignment import ItemAssignment
from receipt_splitter.schemas.person import Person
from receipt_splitter.schemas.receipt import Receipt
from receipt_splitter.schemas.validation import ReceiptValidationResult


class CalculateRequest(BaseModel):
    receipt: Receipt
    people: list[Person]
    assignments: list[ItemAssignment] = []


class CalculateResponse(BaseModel):
    people: list[Person]
    unassigned_items: list[int]
    is_fully_assigned: bool
    validation: ReceiptValidationResult
