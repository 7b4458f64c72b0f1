import logging
from decimal import Decimal

from receipt_splitter.schemas.assignment import AssignmentMap
from receipt_splitter.schemas.person import Person, PersonItem
from receipt_splitter.schemas.receipt import Receipt, ReceiptItem
from receipt_splitter.utils.decimal_utils import HUNDRED, ZERO, to_decimal, to_float

logger = logging.getLogger(__name__)


def line_total(item: ReceiptItem) -> Decimal:
    return to_decimal(item.price) * to_decimal(item.quantity)


def share_of_line(total: Decimal, share_percentage) -> Decimal:
    # $0 lines are exactly $0 for everyone, no multiplication
    if total.is_zero():
        return ZERO
    return total * to_decimal(share_percentage) / HUNDRED


def calculate_person_totals(
    receipt: Receipt,
    people: list[Person],
    assignments: AssignmentMap,
) -> list[Person]:
    """
    Recompute every person's items, subtotal, proportional tax/tip and final total.

    Pure: returns new Person objects, inputs are left untouched. All
    intermediate math is Decimal; values become floats only when the
    person's record is built. Items are visited in ascending index order
    so the output does not depend on how the map was assembled.
    """
    subtotal = to_decimal(receipt.subtotal)
    tax = to_decimal(receipt.tax)
    tip = to_decimal(receipt.tip)

    item_indexes = sorted(
        idx for idx in assignments if 0 <= idx < len(receipt.items)
    )

    updated_people = []
    for person in people:
        person_items: list[PersonItem] = []
        total_before_tax = ZERO

        for idx in item_indexes:
            share = next(
                (a for a in assignments[idx] if a.person_id == person.id), None
            )
            if share is None:
                continue

            item = receipt.items[idx]
            person_share = share_of_line(line_total(item), share.share_percentage)
            total_before_tax += person_share

            person_items.append(PersonItem(
                item_id=idx,
                item_name=item.name,
                original_price=item.price,
                quantity=item.quantity,
                share_percentage=share.share_percentage,
                amount=to_float(person_share),
            ))

        person_tax = ZERO
        person_tip = ZERO
        if not subtotal.is_zero():
            proportion = total_before_tax / subtotal
            person_tax = tax * proportion
            person_tip = tip * proportion

        final_total = total_before_tax + person_tax + person_tip

        updated_people.append(person.model_copy(update={
            "items": person_items,
            "total_before_tax": to_float(total_before_tax),
            "tax": to_float(person_tax),
            "tip": to_float(person_tip),
            "final_total": to_float(final_total),
        }))

    logger.debug(f"Recalculated totals for {len(updated_people)} people across {len(item_indexes)} assigned items")
    return updated_people
