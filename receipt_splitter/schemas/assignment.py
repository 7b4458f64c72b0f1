from typing import Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field


class ShareAssignment(BaseModel):
    model_config = ConfigDict(frozen=True)
    person_id: str
    share_percentage: float = Field(ge=0, le=100)


# item index -> shares of that item. Never mutated in place; builders in
# assignment_service return a fresh dict.
AssignmentMap = Mapping[int, Sequence[ShareAssignment]]


class ItemAssignment(BaseModel):
    item_index: int = Field(ge=0)
    shares: list[ShareAssignment]


class EqualSharesRequest(BaseModel):
    person_ids: list[str] = Field(min_length=1)


class EqualSharesResponse(BaseModel):
    shares: list[ShareAssignment]
