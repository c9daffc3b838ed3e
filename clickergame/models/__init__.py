from clickergame.models.user import User
from clickergame.models.upgrade import Upgrade
from clickergame.models.stock import Stock
from clickergame.models.holding import EnrichedHolding, Holding
from clickergame.models.document import GameDocument, IdCounters

__all__ = [
    "User",
    "Upgrade",
    "Stock",
    "Holding",
    "EnrichedHolding",
    "GameDocument",
    "IdCounters",
]
