from pydantic import BaseModel


class VenmoLinkRequest(BaseModel):
    phone: str
    amount: float
    note: str = ""
    person_name: str | None = None


class VenmoLinkResponse(BaseModel):
    url: str
    note: str
