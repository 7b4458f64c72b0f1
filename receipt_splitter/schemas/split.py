import enum

from pydantic import BaseModel

from receipt_splitter.schemas.person import Person


class SplitDataError(str, enum.Enum):
    EMPTY_PEOPLE_ARRAY = "EMPTY_PEOPLE_ARRAY"
    MISMATCHED_ARRAYS = "MISMATCHED_ARRAYS"
    EMPTY_NAME = "EMPTY_NAME"
    NAME_TOO_LONG = "NAME_TOO_LONG"
    INVALID_NAME_CHARACTER = "INVALID_NAME_CHARACTER"
    TOO_MANY_PEOPLE = "TOO_MANY_PEOPLE"
    EMPTY_NOTE = "EMPTY_NOTE"
    NOTE_TOO_LONG = "NOTE_TOO_LONG"
    INVALID_PHONE_NUMBER = "INVALID_PHONE_NUMBER"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INVALID_TOTAL = "INVALID_TOTAL"
    TOTAL_MISMATCH = "TOTAL_MISMATCH"
    INVALID_DATE_FORMAT = "INVALID_DATE_FORMAT"


class SharedSplitData(BaseModel):
    """What a shareable link carries. Constructed without checks; see validate_split_data."""
    names: list[str]
    amounts: list[float]
    total: float
    note: str
    phone: str
    date: str | None = None


class SplitValidationResult(BaseModel):
    is_valid: bool
    errors: list[SplitDataError] = []
    error_messages: list[str] = []


class ShareRequest(BaseModel):
    people: list[Person]
    note: str
    phone: str
    date: str | None = None
    base_url: str | None = None


class ShareResponse(BaseModel):
    url: str
