import logging
import math
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Mapping, Sequence

from starlette.datastructures import QueryParams

from receipt_splitter.schemas.person import Person
from receipt_splitter.schemas.split import SharedSplitData, SplitDataError, SplitValidationResult
from receipt_splitter.utils.decimal_utils import ZERO, format_fixed, is_finite_number, to_decimal

logger = logging.getLogger(__name__)

MAX_NOTE_LENGTH = 200
MAX_NAME_LENGTH = 50
MAX_PEOPLE = 50
# Each 2-decimal amount may be off by up to a cent after rounding
SPLIT_AMOUNT_DEVIATION_PER_PERSON = Decimal("0.01")

# Only formatting punctuation is tolerated around the digits
_PHONE_CHARS = re.compile(r"^\+?[\d\s().\-]+$")
# NANP: area code can't start with 0 or 1, optional leading country code 1
_PHONE_DIGITS = re.compile(r"^1?[2-9]\d{9}$")

COMMON_DATE_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y/%m/%d",
    "%m-%d-%Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
)


class SplitDataValidationError(ValueError):
    """Raised when a split is serialized from input that can't make a valid link."""

    def __init__(self, result: SplitValidationResult):
        self.errors = result.errors
        self.error_messages = result.error_messages
        super().__init__(f"Invalid split data: {result.error_messages[0]}")


def normalize_phone(phone: str) -> str:
    return re.sub(r"\D", "", phone or "")


def is_valid_phone_number(phone: str) -> bool:
    """10-digit US numbers, or 11 digits with a leading 1. Punctuation is ignored."""
    if not phone or not _PHONE_CHARS.match(phone.strip()):
        return False
    return bool(_PHONE_DIGITS.match(normalize_phone(phone)))


def is_valid_date_format(value: str) -> bool:
    """ISO 8601 date/datetime, or one of a handful of common written formats."""
    if not value:
        return False
    value = value.strip()
    # anything shorter can't hold a full day, month and year
    if len(value) < 8:
        return False

    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
        return True
    except ValueError:
        pass

    for fmt in COMMON_DATE_FORMATS:
        try:
            datetime.strptime(value, fmt)
            return True
        except ValueError:
            continue
    return False


class _Errors:
    def __init__(self):
        self.codes: list[SplitDataError] = []
        self.messages: list[str] = []

    def add(self, code: SplitDataError, message: str):
        self.codes.append(code)
        self.messages.append(message)

    def result(self) -> SplitValidationResult:
        return SplitValidationResult(
            is_valid=not self.codes, errors=self.codes, error_messages=self.messages,
        )


def _check_names(names: Sequence[str], errors: _Errors):
    if len(names) > MAX_PEOPLE:
        errors.add(SplitDataError.TOO_MANY_PEOPLE, f"A split can include at most {MAX_PEOPLE} people")
    for name in names:
        if not name or not name.strip():
            errors.add(SplitDataError.EMPTY_NAME, "Person names cannot be empty")
        elif len(name.strip()) > MAX_NAME_LENGTH:
            errors.add(SplitDataError.NAME_TOO_LONG, f"Name '{name}' exceeds {MAX_NAME_LENGTH} characters")
        elif "," in name:
            errors.add(SplitDataError.INVALID_NAME_CHARACTER, f"Name '{name}' cannot contain commas")


def _check_note_phone_date(note: str | None, phone: str | None, date: str | None, errors: _Errors):
    if not note or not note.strip():
        errors.add(SplitDataError.EMPTY_NOTE, "Note/memo is required for split sharing")
    elif len(note) > MAX_NOTE_LENGTH:
        errors.add(SplitDataError.NOTE_TOO_LONG, f"Note '{note}' exceeds {MAX_NOTE_LENGTH} characters")

    if not phone or not phone.strip():
        errors.add(SplitDataError.INVALID_PHONE_NUMBER, "Phone number is required for split sharing")
    elif not is_valid_phone_number(phone):
        errors.add(SplitDataError.INVALID_PHONE_NUMBER, f"Phone number '{phone}' format is invalid")

    if date and not is_valid_date_format(date):
        errors.add(SplitDataError.INVALID_DATE_FORMAT, f"Date format '{date}' is invalid")


def _is_valid_amount(value) -> bool:
    return is_finite_number(value) and to_decimal(value) >= 0


def validate_serialization_input(
    people: Sequence[Person],
    note: str | None,
    phone: str | None,
    date: str | None = None,
) -> SplitValidationResult:
    """Check everything a shareable link needs before building one."""
    errors = _Errors()

    if not people:
        errors.add(SplitDataError.EMPTY_PEOPLE_ARRAY, "At least one person must be included in the split")
    else:
        _check_names([p.name for p in people], errors)
        for person in people:
            if not _is_valid_amount(person.final_total):
                errors.add(SplitDataError.INVALID_AMOUNT, f"Amount for '{person.name}' must be a non-negative number")

    _check_note_phone_date(note, phone, date, errors)
    return errors.result()


def validate_split_data_detailed(data: SharedSplitData) -> SplitValidationResult:
    """
    Re-check a decoded split from scratch: parallel arrays, names, amounts,
    total vs. sum of amounts (1 cent per person of slack), note, phone, date.
    """
    errors = _Errors()
    names, amounts = data.names, data.amounts

    if not names:
        errors.add(SplitDataError.EMPTY_PEOPLE_ARRAY, "At least one person must be included in the split")
    if len(names) != len(amounts):
        errors.add(SplitDataError.MISMATCHED_ARRAYS, "Names and amounts must have the same length")

    _check_names(names, errors)

    amounts_ok = True
    for amount in amounts:
        if not _is_valid_amount(amount):
            amounts_ok = False
            errors.add(SplitDataError.INVALID_AMOUNT, f"Amount '{amount}' must be a non-negative number")

    total_ok = _is_valid_amount(data.total)
    if not total_ok:
        errors.add(SplitDataError.INVALID_TOTAL, f"Total '{data.total}' must be a non-negative number")

    if names and len(names) == len(amounts) and amounts_ok and total_ok:
        calculated = sum((to_decimal(a) for a in amounts), ZERO)
        total = to_decimal(data.total)
        tolerance = SPLIT_AMOUNT_DEVIATION_PER_PERSON * len(names)
        if abs(calculated - total) > tolerance:
            errors.add(
                SplitDataError.TOTAL_MISMATCH,
                f"Amounts add up to {format_fixed(calculated)} but total is {format_fixed(total)}",
            )

    _check_note_phone_date(data.note, data.phone, data.date, errors)
    return errors.result()


def validate_split_data(data: SharedSplitData) -> bool:
    return validate_split_data_detailed(data).is_valid


def serialize_split_data(
    people: Sequence[Person],
    note: str,
    phone: str,
    date: str | None = None,
) -> QueryParams:
    """
    Encode a finished split as query parameters.

    People are sorted by name so the same split always yields the same link.
    Amounts and total are fixed to 2 decimals; the phone keeps digits only.
    Raises SplitDataValidationError if the input can't produce a valid link
    (no people, blank note or phone, among others).
    """
    validation = validate_serialization_input(people, note, phone, date)
    if not validation.is_valid:
        raise SplitDataValidationError(validation)

    sorted_people = sorted(people, key=lambda p: p.name.strip())
    total = sum((to_decimal(p.final_total) for p in sorted_people), ZERO)

    params = [
        ("names", ",".join(p.name.strip() for p in sorted_people)),
        ("amounts", ",".join(format_fixed(p.final_total) for p in sorted_people)),
        ("total", format_fixed(total)),
        ("note", note.strip()),
        ("phone", normalize_phone(phone)),
    ]
    if date:
        params.append(("date", date))
    return QueryParams(params)


def _parse_amount(raw: str) -> float | None:
    try:
        value = Decimal(raw.strip())
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite() or value < 0:
        return None
    # huge exponents like 1e400 are finite as Decimal but overflow a float
    amount = float(value)
    return amount if math.isfinite(amount) else None


def _as_query_params(params) -> QueryParams:
    if isinstance(params, QueryParams):
        return params
    if isinstance(params, str):
        # accept a full link or a bare query string
        if "?" in params:
            params = params.split("?", 1)[1]
        return QueryParams(params)
    return QueryParams(params)


def deserialize_split_data(params: QueryParams | Mapping[str, str] | str) -> SharedSplitData | None:
    """
    Decode a shared link's parameters. Returns None for anything malformed:
    missing or blank required keys, names/amounts length mismatch, blank
    names, amounts or total that aren't non-negative finite numbers.
    Never raises.
    """
    try:
        query = _as_query_params(params)
    except (TypeError, ValueError) as e:
        logger.debug(f"Rejected shared split: unreadable parameters ({e})")
        return None

    required = {
        key: str(query[key]) if query.get(key) is not None else ""
        for key in ("names", "amounts", "total", "note", "phone")
    }
    missing = [key for key, value in required.items() if not value.strip()]
    if missing:
        logger.debug(f"Rejected shared split: missing {missing}")
        return None

    names = [name.strip() for name in required["names"].split(",")]
    amount_strings = required["amounts"].split(",")

    if any(not name for name in names):
        logger.debug("Rejected shared split: empty name")
        return None
    if len(names) != len(amount_strings):
        logger.debug(f"Rejected shared split: {len(names)} names but {len(amount_strings)} amounts")
        return None

    amounts = []
    for raw in amount_strings:
        amount = _parse_amount(raw)
        if amount is None:
            logger.debug(f"Rejected shared split: invalid amount {raw!r}")
            return None
        amounts.append(amount)

    total = _parse_amount(required["total"])
    if total is None:
        logger.debug(f"Rejected shared split: invalid total {required['total']!r}")
        return None

    return SharedSplitData(
        names=names,
        amounts=amounts,
        total=total,
        note=required["note"].strip(),
        phone=required["phone"].strip(),
        date=str(query["date"]) if query.get("date") else None,
    )


def generate_shareable_url(
    base_url: str,
    people: Sequence[Person],
    note: str,
    phone: str,
    date: str | None = None,
) -> str:
    params = serialize_split_data(people, note, phone, date)
    # avoid a doubled slash before /split
    clean_base_url = base_url[:-1] if base_url.endswith("/") else base_url
    return f"{clean_base_url}/split?{params}"
