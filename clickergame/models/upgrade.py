from pydantic import BaseModel


class Upgrade(BaseModel):
    """Catalog entry; buying it raises click income by ``income_boost`` and auto income by half of it."""
    id: int
    name: str
    price: float
    income_boost: float
