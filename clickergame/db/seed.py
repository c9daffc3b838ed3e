"""Seed catalog written the first time the document store is opened."""

from clickergame.models import GameDocument, IdCounters, Stock, Upgrade

SEED_UPGRADES = [
    Upgrade(id=1, name="Kupfer-Maus", price=50, income_boost=2),
    Upgrade(id=2, name="Auto-Clicker V1", price=200, income_boost=5),
    Upgrade(id=3, name="Goldene Tastatur", price=10000, income_boost=250),
]

SEED_STOCKS = [
    Stock(id=1, symbol="BTC", name="Bitcoin", price=50000.00),
    Stock(id=2, symbol="ETH", name="Ethereum", price=2500.00),
    Stock(id=3, symbol="SOL", name="Solana", price=120.00),
    Stock(id=4, symbol="LTC", name="Litecoin", price=80.00),
    Stock(id=5, symbol="ADA", name="Cardano", price=0.50),
]


def seed_document() -> GameDocument:
    """Return a fresh seeded document. Counters continue after the seeded catalog ids."""
    return GameDocument(
        users=[],
        upgrades=[u.model_copy() for u in SEED_UPGRADES],
        stocks=[s.model_copy() for s in SEED_STOCKS],
        user_stocks=[],
        next_id=IdCounters(
            user=1,
            stock=len(SEED_STOCKS) + 1,
            upgrade=len(SEED_UPGRADES) + 1,
            user_stock=1,
        ),
    )
