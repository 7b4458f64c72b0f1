from receipt_splitter.schemas.assignment import ShareAssignment
from receipt_splitter.schemas.person import Person, PersonItem
from receipt_splitter.schemas.receipt import Receipt, ReceiptItem
from receipt_splitter.schemas.validation import InvariantViolation
from receipt_splitter.services.assignment_service import equal_split_shares
from receipt_splitter.services.calculation_service import calculate_person_totals
from receipt_splitter.services.validation_service import validate_receipt_invariants


def share(person_id, pct):
    return ShareAssignment(person_id=person_id, share_percentage=pct)


def error_types(result):
    return [e.type for e in result.errors]


def test_no_receipt_is_valid():
    result = validate_receipt_invariants(None, {}, [])
    assert result.is_valid is True
    assert result.errors == []


def test_consistent_split_is_valid():
    receipt = Receipt(
        subtotal=100, tax=10, tip=15, total=125,
        items=[ReceiptItem(name="Burger", price=50), ReceiptItem(name="Fries", price=25, quantity=2)],
    )
    assignments = {0: [share("a", 100)], 1: [share("b", 100)]}
    people = calculate_person_totals(
        receipt, [Person(id="a", name="Alice"), Person(id="b", name="Bob")], assignments,
    )
    result = validate_receipt_invariants(receipt, assignments, people)
    assert result.is_valid is True


def test_negative_receipt_amounts_all_reported():
    receipt = Receipt(subtotal=-1, tax=-2, tip=-3, total=-6, items=[])
    result = validate_receipt_invariants(receipt, {}, [])
    assert result.is_valid is False
    assert error_types(result) == [
        InvariantViolation.negative_subtotal,
        InvariantViolation.negative_tax,
        InvariantViolation.negative_tip,
        InvariantViolation.negative_total,
    ]
    assert result.errors[1].actual == -2
    assert result.errors[1].expected == 0


def test_null_tip_is_not_checked():
    receipt = Receipt(subtotal=0, tax=0, tip=None, total=0, items=[])
    assert validate_receipt_invariants(receipt, {}, []).is_valid is True


def test_negative_item_values():
    receipt = Receipt(
        subtotal=-5, tax=0, total=0,
        items=[ReceiptItem(name="Refund", price=-5, quantity=1), ReceiptItem(name="Odd", price=0, quantity=-1)],
    )
    result = validate_receipt_invariants(receipt, {}, [])
    types = error_types(result)
    assert InvariantViolation.negative_item_price in types
    assert InvariantViolation.negative_item_quantity in types
    price_error = next(e for e in result.errors if e.type == InvariantViolation.negative_item_price)
    assert price_error.item_id == "0"
    assert price_error.item_name == "Refund"


def test_items_not_matching_subtotal():
    receipt = Receipt(
        subtotal=40, tax=0, total=40,
        items=[ReceiptItem(name="A", price=10), ReceiptItem(name="B", price=20)],
    )
    result = validate_receipt_invariants(receipt, {}, [])
    assert error_types(result) == [InvariantViolation.items_subtotal_mismatch]
    error = result.errors[0]
    assert error.expected == 40
    assert error.actual == 30
    assert error.diff == 10
    assert error.tolerance == 0.02


def test_items_within_per_item_tolerance():
    """Two items allow two cents of drift against the subtotal."""
    receipt = Receipt(
        subtotal=30.00, tax=0, total=30.00,
        items=[ReceiptItem(name="A", price=10.01), ReceiptItem(name="B", price=20.01)],
    )
    assert validate_receipt_invariants(receipt, {}, []).is_valid is True


def test_three_way_split_of_odd_amount_passes():
    receipt = Receipt(subtotal=100.01, tax=0, total=100.01, items=[ReceiptItem(name="Platter", price=100.01)])
    assignments = {0: [share("a", 33.34), share("b", 33.34), share("c", 33.33)]}
    result = validate_receipt_invariants(receipt, assignments, [])
    assert result.is_valid is True


def test_large_split_discrepancy_fails():
    receipt = Receipt(subtotal=100, tax=0, total=100, items=[ReceiptItem(name="Platter", price=100)])
    assignments = {0: [share("a", 35), share("b", 35), share("c", 35)]}
    result = validate_receipt_invariants(receipt, assignments, [])
    assert error_types(result) == [InvariantViolation.item_splits_mismatch]
    error = result.errors[0]
    assert error.item_id == "0"
    assert error.expected == 100
    assert error.actual == 105
    assert error.tolerance == 0.03


def test_equal_split_shares_pass_item_check():
    receipt = Receipt(subtotal=10, tax=0, total=10, items=[ReceiptItem(name="Nachos", price=10)])
    assignments = {0: equal_split_shares(["a", "b", "c", "d", "e", "f", "g"])}
    assert validate_receipt_invariants(receipt, assignments, []).is_valid is True


def test_unassigned_items_are_not_errors():
    receipt = Receipt(
        subtotal=30, tax=0, total=30,
        items=[ReceiptItem(name="A", price=10), ReceiptItem(name="B", price=20)],
    )
    assignments = {0: [share("a", 100)]}
    assert validate_receipt_invariants(receipt, assignments, []).is_valid is True


def test_negative_person_values():
    person = Person(
        id="a", name="Alice",
        items=[PersonItem(item_id=0, item_name="Refund", original_price=-5, quantity=1, share_percentage=100, amount=-5)],
        total_before_tax=-5, tax=-0.5, tip=-1, final_total=-6.5,
    )
    receipt = Receipt(subtotal=0, tax=0, total=0, items=[])
    result = validate_receipt_invariants(receipt, {}, [person])
    assert error_types(result) == [
        InvariantViolation.negative_person_total,
        InvariantViolation.negative_person_tax,
        InvariantViolation.negative_person_tip,
        InvariantViolation.negative_person_final_total,
        InvariantViolation.negative_person_item_amount,
    ]
    assert "Alice" in result.errors[0].message


def test_checks_do_not_stop_at_first_failure():
    receipt = Receipt(
        subtotal=-1, tax=0, total=100,
        items=[ReceiptItem(name="Platter", price=100)],
    )
    assignments = {0: [share("a", 50)]}
    result = validate_receipt_invariants(receipt, assignments, [])
    assert error_types(result) == [
        InvariantViolation.negative_subtotal,
        InvariantViolation.items_subtotal_mismatch,
        InvariantViolation.item_splits_mismatch,
    ]
