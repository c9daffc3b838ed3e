from pydantic import BaseModel, ConfigDict, Field

from clickergame.models.holding import Holding
from clickergame.models.stock import Stock
from clickergame.models.upgrade import Upgrade
from clickergame.models.user import User


class IdCounters(BaseModel):
    """Next id per entity kind; persisted so ids survive restarts and are never reused."""
    model_config = ConfigDict(populate_by_name=True)

    user: int = 1
    stock: int = 1
    upgrade: int = 1
    user_stock: int = Field(default=1, alias="userStock")


class GameDocument(BaseModel):
    """The single persisted document. Serialize with ``by_alias=True``."""
    model_config = ConfigDict(populate_by_name=True)

    users: list[User] = Field(default_factory=list)
    upgrades: list[Upgrade] = Field(default_factory=list)
    stocks: list[Stock] = Field(default_factory=list)
    user_stocks: list[Holding] = Field(default_factory=list, alias="userStocks")
    next_id: IdCounters = Field(default_factory=IdCounters, alias="nextId")

    def allocate_id(self, kind: str) -> int:
        """Return the next id for ``kind`` and advance its counter."""
        value = getattr(self.next_id, kind)
        setattr(self.next_id, kind, value + 1)
        return value

    def find_user(self, user_id: int) -> User | None:
        return next((u for u in self.users if u.id == user_id), None)

    def find_user_by_username(self, username: str) -> User | None:
        return next((u for u in self.users if u.username == username), None)

    def find_upgrade(self, upgrade_id: int) -> Upgrade | None:
        return next((u for u in self.upgrades if u.id == upgrade_id), None)

    def find_stock(self, stock_id: int) -> Stock | None:
        return next((s for s in self.stocks if s.id == stock_id), None)

    def find_holding(self, user_id: int, stock_id: int) -> Holding | None:
        return next(
            (h for h in self.user_stocks if h.user_id == user_id and h.stock_id == stock_id),
            None,
        )
