from pydantic import BaseModel


class Holding(BaseModel):
    """A user's position in one stock. At most one per (user_id, stock_id)."""
    id: int
    user_id: int
    stock_id: int
    quantity: int = 1
    buy_price: float  # price paid on the first purchase only


class EnrichedHolding(Holding):
    symbol: str
    name: str
    current_price: float
