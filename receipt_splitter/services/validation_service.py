import logging
from decimal import Decimal

from receipt_splitter.schemas.assignment import AssignmentMap
from receipt_splitter.schemas.person import Person
from receipt_splitter.schemas.receipt import Receipt
from receipt_splitter.schemas.validation import (
    InvariantViolation, ReceiptValidationError, ReceiptValidationResult,
)
from receipt_splitter.services.calculation_service import line_total, share_of_line
from receipt_splitter.utils.decimal_utils import ZERO, quantize_money, to_decimal, to_float

logger = logging.getLogger(__name__)

# Rounding a line or a share to cents drifts by at most half a cent, so the
# allowed drift grows with the number of lines / people involved.
ITEM_TOLERANCE_PER_ITEM = Decimal("0.01")
TOLERANCE_PER_PERSON = Decimal("0.01")


def _negative(violation: InvariantViolation, message: str, actual, **extra) -> ReceiptValidationError:
    return ReceiptValidationError(type=violation, message=message, expected=0, actual=actual, **extra)


def _exceeds(difference: Decimal, tolerance: Decimal) -> bool:
    # Compare at cent precision so sub-cent noise never trips the check
    return quantize_money(difference) > quantize_money(tolerance)


def _check_receipt_amounts(receipt: Receipt) -> list[ReceiptValidationError]:
    errors = []
    if receipt.subtotal < 0:
        errors.append(_negative(InvariantViolation.negative_subtotal, "Receipt subtotal cannot be negative", receipt.subtotal))
    if receipt.tax < 0:
        errors.append(_negative(InvariantViolation.negative_tax, "Receipt tax cannot be negative", receipt.tax))
    if receipt.tip is not None and receipt.tip < 0:
        errors.append(_negative(InvariantViolation.negative_tip, "Receipt tip cannot be negative", receipt.tip))
    if receipt.total < 0:
        errors.append(_negative(InvariantViolation.negative_total, "Receipt total cannot be negative", receipt.total))

    for idx, item in enumerate(receipt.items):
        if item.price < 0:
            errors.append(_negative(
                InvariantViolation.negative_item_price,
                f'Item "{item.name}" has negative price',
                item.price, item_id=str(idx), item_name=item.name,
            ))
        if item.quantity < 0:
            errors.append(_negative(
                InvariantViolation.negative_item_quantity,
                f'Item "{item.name}" has negative quantity',
                item.quantity, item_id=str(idx), item_name=item.name,
            ))
    return errors


def _check_items_match_subtotal(receipt: Receipt) -> list[ReceiptValidationError]:
    if not receipt.items:
        return []

    items_total = sum((line_total(item) for item in receipt.items), ZERO)
    subtotal = to_decimal(receipt.subtotal)
    difference = abs(items_total - subtotal)
    tolerance = ITEM_TOLERANCE_PER_ITEM * len(receipt.items)

    if not _exceeds(difference, tolerance):
        return []
    return [ReceiptValidationError(
        type=InvariantViolation.items_subtotal_mismatch,
        message="Sum of item prices does not match subtotal",
        expected=to_float(subtotal),
        actual=to_float(items_total),
        diff=to_float(difference),
        tolerance=to_float(tolerance),
    )]


def _check_item_splits(receipt: Receipt, assignments: AssignmentMap) -> list[ReceiptValidationError]:
    errors = []
    for idx, item in enumerate(receipt.items):
        shares = assignments.get(idx) or []
        if not shares:
            # unassigned is reported elsewhere, it isn't an inconsistency
            continue

        item_total = line_total(item)
        splits_total = sum(
            (share_of_line(item_total, s.share_percentage) for s in shares), ZERO
        )
        difference = abs(splits_total - item_total)
        tolerance = TOLERANCE_PER_PERSON * len(shares)

        if _exceeds(difference, tolerance):
            errors.append(ReceiptValidationError(
                type=InvariantViolation.item_splits_mismatch,
                message=f'Sum of splits for item "{item.name}" does not match item price',
                item_id=str(idx),
                item_name=item.name,
                expected=to_float(item_total),
                actual=to_float(splits_total),
                diff=to_float(difference),
                tolerance=to_float(tolerance),
            ))
    return errors


def _check_people(people: list[Person]) -> list[ReceiptValidationError]:
    errors = []
    for person in people:
        if person.total_before_tax < 0:
            errors.append(_negative(InvariantViolation.negative_person_total, f'Person "{person.name}" has negative total before tax', person.total_before_tax))
        if person.tax < 0:
            errors.append(_negative(InvariantViolation.negative_person_tax, f'Person "{person.name}" has negative tax', person.tax))
        if person.tip < 0:
            errors.append(_negative(InvariantViolation.negative_person_tip, f'Person "{person.name}" has negative tip', person.tip))
        if person.final_total < 0:
            errors.append(_negative(InvariantViolation.negative_person_final_total, f'Person "{person.name}" has negative final total', person.final_total))

        for item in person.items:
            if item.amount < 0:
                errors.append(_negative(
                    InvariantViolation.negative_person_item_amount,
                    f'Person "{person.name}" has negative amount for item "{item.item_name}"',
                    item.amount, item_id=str(item.item_id), item_name=item.item_name,
                ))
    return errors


def validate_receipt_invariants(
    receipt: Receipt | None,
    assignments: AssignmentMap,
    people: list[Person],
) -> ReceiptValidationResult:
    """
    Cross-check receipt, assignments and computed people for inconsistent state.

    Every check runs and every violation is collected; nothing here raises.
    Violations are advisory and don't stop the caller from carrying on.
    No receipt means nothing to be inconsistent with, so it is valid.
    """
    if receipt is None:
        return ReceiptValidationResult(is_valid=True, errors=[])

    errors = [
        *_check_receipt_amounts(receipt),
        *_check_items_match_subtotal(receipt),
        *_check_item_splits(receipt, assignments),
        *_check_people(people),
    ]

    if errors:
        logger.info(f"Receipt invariant check found {len(errors)} violation(s): {[e.type.value for e in errors]}")
    return ReceiptValidationResult(is_valid=not errors, errors=errors)
