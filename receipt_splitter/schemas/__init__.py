from receipt_splitter.schemas.receipt import Receipt, ReceiptItem
from receipt_splitter.schemas.person import Person, PersonItem
from receipt_splitter.schemas.assignment import AssignmentMap, ShareAssignment, ItemAssignment
from receipt_splitter.schemas.validation import InvariantViolation, ReceiptValidationError, ReceiptValidationResult
from receipt_splitter.schemas.split import SharedSplitData, SplitDataError, SplitValidationResult
from receipt_splitter.schemas.currency import CurrencyInfo

__all__ = [
    "Receipt", "ReceiptItem", "Person", "PersonItem",
    "AssignmentMap", "ShareAssignment", "ItemAssignment",
    "InvariantViolation", "ReceiptValidationError", "ReceiptValidationResult",
    "SharedSplitData", "SplitDataError", "SplitValidationResult",
    "CurrencyInfo",
]
