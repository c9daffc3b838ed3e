from pydantic import BaseModel


class Stock(BaseModel):
    id: int
    symbol: str
    name: str
    price: float
