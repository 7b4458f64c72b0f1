from pydantic import BaseModel, ConfigDict


class PersonItem(BaseModel):
    model_config = ConfigDict(frozen=True)
    item_id: int  # index into Receipt.items
    item_name: str
    original_price: float
    quantity: float
    share_percentage: float
    amount: float


class Person(BaseModel):
    """
    A participant in the split. `items` and the four totals are derived by
    calculate_person_totals and are replaced wholesale on every recompute.
    """
    model_config = ConfigDict(frozen=True)
    id: str
    name: str
    items: list[PersonItem] = []
    total_before_tax: float = 0
    tax: float = 0
    tip: float = 0
    final_total: float = 0
