from urllib.parse import urlencode

from receipt_splitter.core.config import settings
from receipt_splitter.services.split_sharing_service import is_valid_phone_number, normalize_phone
from receipt_splitter.utils.decimal_utils import format_fixed, is_finite_number, to_decimal


def validate_venmo_params(phone: str, amount, note: str = "") -> bool:
    """Phone must be a valid US number, amount within Venmo's single-payment limit, note within its length limit."""
    if not is_valid_phone_number(phone):
        return False
    if not is_finite_number(amount):
        return False
    value = to_decimal(amount)
    if value <= 0 or value > settings.venmo_max_amount:
        return False
    return len(note or "") <= settings.venmo_max_note_length


def generate_venmo_link(phone: str, amount, note: str = "") -> str | None:
    """
    Build a Venmo pay link for one person's share. Nothing is charged; the
    link only pre-fills the payment. Returns None if the parameters are invalid.
    """
    note = (note or "")[:settings.venmo_max_note_length]
    if not validate_venmo_params(phone, amount, note):
        return None

    params = {
        "txn": "pay",
        "recipients": normalize_phone(phone),
        "amount": format_fixed(amount),
    }
    if note.strip():
        params["note"] = note.strip()

    return f"{settings.venmo_base_url}?{urlencode(params)}"


def format_venmo_note(split_note: str | None = None, person_name: str | None = None) -> str:
    note = (split_note or "").strip()
    person = (person_name or "").strip()

    if note and person:
        text = f"{note} - {person}"
    elif note:
        text = note
    elif person:
        text = f"Split with {person}"
    else:
        text = "Receipt Split"

    return text[:settings.venmo_max_note_length]
