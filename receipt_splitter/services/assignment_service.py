from decimal import Decimal
from typing import Iterable, Sequence

from receipt_splitter.schemas.assignment import AssignmentMap, ItemAssignment, ShareAssignment
from receipt_splitter.schemas.receipt import Receipt
from receipt_splitter.utils.decimal_utils import HUNDRED, ZERO, quantize_money, to_decimal

# Equal splits of 100% over n people accumulate up to a few hundredths of rounding
FULL_ASSIGNMENT_TOLERANCE = Decimal("0.01")
# Beyond this, (n - 1) rounded-up shares can exceed 100% and leave the last
# person a negative remainder
MAX_EQUAL_SPLIT_PEOPLE = 100


def total_share_percentage(shares: Iterable[ShareAssignment]) -> Decimal:
    return sum((to_decimal(s.share_percentage) for s in shares), ZERO)


def is_fully_assigned(shares: Sequence[ShareAssignment] | None) -> bool:
    if not shares:
        return False
    return abs(total_share_percentage(shares) - HUNDRED) <= FULL_ASSIGNMENT_TOLERANCE


def get_unassigned_items(receipt: Receipt, assignments: AssignmentMap) -> list[int]:
    """Indices of items whose shares don't add up to 100%, ascending."""
    return [
        idx for idx in range(len(receipt.items))
        if not is_fully_assigned(assignments.get(idx))
    ]


def validate_item_assignments(receipt: Receipt, assignments: AssignmentMap) -> bool:
    """True when every item is assigned at 100%. A receipt without items is never complete."""
    if not receipt.items:
        return False
    return not get_unassigned_items(receipt, assignments)


def equal_split_shares(person_ids: Sequence[str]) -> list[ShareAssignment]:
    """
    Split 100% among people as evenly as two decimals allow.
    Everyone but the last person gets round(100/n, 2); the last person takes
    whatever is left so the shares always sum to exactly 100.00.
    e.g. 3 people -> 33.33, 33.33, 33.34
    """
    n = len(person_ids)
    if n == 0:
        raise ValueError("At least one person is required to split equally")
    if n > MAX_EQUAL_SPLIT_PEOPLE:
        raise ValueError(f"Can split equally among at most {MAX_EQUAL_SPLIT_PEOPLE} people, got {n}")

    share = quantize_money(HUNDRED / Decimal(n))
    remainder = quantize_money(HUNDRED - share * (n - 1))

    return [
        ShareAssignment(
            person_id=pid,
            share_percentage=float(remainder if i == n - 1 else share),
        )
        for i, pid in enumerate(person_ids)
    ]


def assign_item(
    assignments: AssignmentMap,
    item_index: int,
    shares: Sequence[ShareAssignment],
) -> dict[int, list[ShareAssignment]]:
    """
    Return a new map with one item's shares replaced.
    Zero shares are dropped; if nothing remains the item becomes unassigned.
    """
    updated = {idx: list(s) for idx, s in assignments.items()}
    kept = [s for s in shares if s.share_percentage > 0]
    if kept:
        updated[item_index] = kept
    else:
        updated.pop(item_index, None)
    return updated


def remove_person(assignments: AssignmentMap, person_id: str) -> dict[int, list[ShareAssignment]]:
    """Return a new map without any of this person's shares. Emptied items are removed."""
    updated = {}
    for idx, shares in assignments.items():
        remaining = [s for s in shares if s.person_id != person_id]
        if remaining:
            updated[idx] = remaining
    return updated


def split_item_equally(
    assignments: AssignmentMap,
    item_index: int,
    person_ids: Sequence[str],
) -> dict[int, list[ShareAssignment]]:
    return assign_item(assignments, item_index, equal_split_shares(person_ids))


def split_all_evenly(receipt: Receipt, person_ids: Sequence[str]) -> dict[int, list[ShareAssignment]]:
    """Assign every item on the receipt equally to the given people."""
    shares = equal_split_shares(person_ids)
    return {idx: list(shares) for idx in range(len(receipt.items))}


def build_assignment_map(entries: Iterable[ItemAssignment]) -> dict[int, list[ShareAssignment]]:
    """Convert the list form used over the API into an assignment map. Later entries win."""
    result: dict[int, list[ShareAssignment]] = {}
    for entry in entries:
        result = assign_item(result, entry.item_index, entry.shares)
    return result
