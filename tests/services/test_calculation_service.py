import pytest

from receipt_splitter.schemas.assignment import ShareAssignment
from receipt_splitter.schemas.person import Person
from receipt_splitter.schemas.receipt import Receipt, ReceiptItem
from receipt_splitter.services.assignment_service import equal_split_shares, split_all_evenly
from receipt_splitter.services.calculation_service import calculate_person_totals


ALICE = Person(id="alice", name="Alice")
BOB = Person(id="bob", name="Bob")
CHARLIE = Person(id="charlie", name="Charlie")


def make_receipt(items, subtotal, tax=0, tip=None, total=None):
    return Receipt(
        restaurant="Test Diner",
        subtotal=subtotal,
        tax=tax,
        tip=tip,
        total=total if total is not None else subtotal + tax + (tip or 0),
        items=[ReceiptItem(name=n, price=p, quantity=q) for n, p, q in items],
    )


def test_proportional_tax_and_tip():
    """Burger for Alice, two Fries for Bob: each owes half of tax and tip."""
    receipt = make_receipt([("Burger", 50, 1), ("Fries", 25, 2)], subtotal=100, tax=10, tip=15, total=125)
    assignments = {
        0: [ShareAssignment(person_id="alice", share_percentage=100)],
        1: [ShareAssignment(person_id="bob", share_percentage=100)],
    }
    alice, bob = calculate_person_totals(receipt, [ALICE, BOB], assignments)

    for person in (alice, bob):
        assert person.total_before_tax == 50
        assert person.tax == 5
        assert person.tip == 7.5
        assert person.final_total == 62.5

    assert alice.items[0].item_name == "Burger"
    assert alice.items[0].amount == 50
    assert bob.items[0].quantity == 2
    assert bob.items[0].original_price == 25


def test_uneven_proportions():
    receipt = make_receipt([("Steak", 60, 1), ("Salad", 20, 1)], subtotal=80, tax=8, tip=16)
    assignments = {
        0: [ShareAssignment(person_id="alice", share_percentage=100)],
        1: [ShareAssignment(person_id="bob", share_percentage=100)],
    }
    alice, bob = calculate_person_totals(receipt, [ALICE, BOB], assignments)
    assert alice.tax == 6
    assert alice.tip == 12
    assert alice.final_total == 78
    assert bob.final_total == 26


def test_fractional_shares_sum_to_receipt_total():
    receipt = make_receipt(
        [("Pizza", 30, 1), ("Wine", 45.5, 1), ("Bread", 3.99, 3)],
        subtotal=87.47, tax=7.22, tip=17.49,
    )
    people = [ALICE, BOB, CHARLIE]
    assignments = split_all_evenly(receipt, [p.id for p in people])
    result = calculate_person_totals(receipt, people, assignments)

    total = sum(p.final_total for p in result)
    assert total == pytest.approx(receipt.total, abs=0.01 * len(people))


def test_equal_split_remainder_goes_to_last_person():
    receipt = make_receipt([("Pizza", 30, 1)], subtotal=30)
    assignments = {0: equal_split_shares(["alice", "bob", "charlie"])}
    alice, bob, charlie = calculate_person_totals(receipt, [ALICE, BOB, CHARLIE], assignments)
    assert alice.total_before_tax == 9.999
    assert bob.total_before_tax == 9.999
    assert charlie.total_before_tax == 10.002


def test_zero_price_item_contributes_nothing():
    receipt = make_receipt([("Water", 0, 1), ("Soup", 12, 1)], subtotal=12, tax=1.2)
    assignments = {
        0: [
            ShareAssignment(person_id="alice", share_percentage=33.33),
            ShareAssignment(person_id="bob", share_percentage=66.67),
        ],
        1: [ShareAssignment(person_id="bob", share_percentage=100)],
    }
    alice, bob = calculate_person_totals(receipt, [ALICE, BOB], assignments)
    assert alice.total_before_tax == 0
    assert alice.items[0].amount == 0
    assert alice.final_total == 0
    assert bob.items[0].amount == 0
    assert bob.total_before_tax == 12


def test_zero_subtotal_means_no_tax_or_tip():
    receipt = make_receipt([("Freebie", 0, 1)], subtotal=0, tax=5, tip=2, total=7)
    assignments = {0: [ShareAssignment(person_id="alice", share_percentage=100)]}
    (alice,) = calculate_person_totals(receipt, [ALICE], assignments)
    assert alice.tax == 0
    assert alice.tip == 0
    assert alice.final_total == 0


def test_missing_tip_counts_as_zero():
    receipt = make_receipt([("Taco", 10, 1)], subtotal=10, tax=1, tip=None)
    assignments = {0: [ShareAssignment(person_id="alice", share_percentage=100)]}
    (alice,) = calculate_person_totals(receipt, [ALICE], assignments)
    assert alice.tip == 0
    assert alice.final_total == 11


def test_unassigned_person_gets_zero_totals():
    receipt = make_receipt([("Taco", 10, 1)], subtotal=10, tax=1)
    assignments = {0: [ShareAssignment(person_id="alice", share_percentage=100)]}
    _, bob = calculate_person_totals(receipt, [ALICE, BOB], assignments)
    assert bob.items == []
    assert bob.total_before_tax == 0
    assert bob.final_total == 0


def test_assignment_for_missing_item_is_ignored():
    receipt = make_receipt([("Taco", 10, 1)], subtotal=10)
    assignments = {
        0: [ShareAssignment(person_id="alice", share_percentage=100)],
        5: [ShareAssignment(person_id="alice", share_percentage=100)],
    }
    (alice,) = calculate_person_totals(receipt, [ALICE], assignments)
    assert [i.item_id for i in alice.items] == [0]
    assert alice.total_before_tax == 10


def test_items_listed_in_receipt_order():
    receipt = make_receipt([("A", 1, 1), ("B", 2, 1), ("C", 3, 1)], subtotal=6)
    share = [ShareAssignment(person_id="alice", share_percentage=100)]
    assignments = {2: share, 0: share, 1: share}
    (alice,) = calculate_person_totals(receipt, [ALICE], assignments)
    assert [i.item_id for i in alice.items] == [0, 1, 2]


def test_pure_and_deterministic():
    receipt = make_receipt([("Pizza", 30, 1)], subtotal=30, tax=2.5, tip=4)
    assignments = {0: equal_split_shares(["alice", "bob", "charlie"])}
    people = [ALICE, BOB, CHARLIE]

    first = calculate_person_totals(receipt, people, assignments)
    second = calculate_person_totals(receipt, people, assignments)

    assert first == second
    assert all(p.items == [] and p.final_total == 0 for p in people)
    assert len(assignments[0]) == 3


def test_recalculation_replaces_previous_totals():
    receipt = make_receipt([("Pizza", 30, 1)], subtotal=30)
    assignments = {0: [ShareAssignment(person_id="alice", share_percentage=100)]}
    (alice,) = calculate_person_totals(receipt, [ALICE], assignments)

    edited = receipt.model_copy(update={"tax": 3.0, "total": 33.0})
    (alice,) = calculate_person_totals(edited, [alice], assignments)
    assert len(alice.items) == 1
    assert alice.tax == 3
    assert alice.final_total == 33
