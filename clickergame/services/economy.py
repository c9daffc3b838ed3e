"""Balance and income transitions.

The ``apply_*`` functions are pure transitions over a loaded document: they
validate first and only then mutate, so a rejected operation leaves the
document untouched. The async wrappers run each one inside a store
transaction, which persists the document only when the transition succeeds.
"""

import math
from typing import Any, Iterator

from clickergame.core.config import get_settings
from clickergame.core.exceptions import (
    InsufficientFundsError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from clickergame.core.logging import get_logger
from clickergame.models import EnrichedHolding, GameDocument, Holding, Upgrade, User
from clickergame.storage.base import DocumentStore

log = get_logger(__name__)


def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # int too large for a float
        return False


def _quoted_price(value: Any) -> float | None:
    """Client price quotes arrive as numbers or numeric strings (the page sends a data attribute)."""
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if not _is_number(value) or value < 0:
        return None
    return float(value)


def _user(document: GameDocument, user_id: int) -> User:
    user = document.find_user(user_id)
    if user is None:
        raise UnauthorizedError("User not found", clear_session=True)
    return user


def game_state(user: User) -> dict[str, float]:
    return {
        "balance": user.balance,
        "incomePerClick": user.income_per_click,
        "autoIncomePerSecond": user.auto_income_per_second,
    }


def apply_click(document: GameDocument, user_id: int) -> User:
    user = _user(document, user_id)
    user.balance += user.income_per_click
    return user


def apply_upgrade_purchase(document: GameDocument, user_id: int, upgrade_id: int | None) -> Upgrade:
    user = _user(document, user_id)
    upgrade = document.find_upgrade(upgrade_id)
    if upgrade is None:
        raise NotFoundError("Upgrade not found")
    if user.balance < upgrade.price:
        raise InsufficientFundsError(
            "Not enough money", details={"balance": user.balance, "price": upgrade.price}
        )
    user.balance -= upgrade.price
    user.income_per_click += upgrade.income_boost
    user.auto_income_per_second += upgrade.income_boost / 2
    return upgrade


def apply_balance_sync(document: GameDocument, user_id: int, balance: Any) -> User:
    """Overwrite the balance with the client's value (client-side passive income checkpoint)."""
    if not _is_number(balance):
        raise ValidationError("Balance must be a finite number")
    user = _user(document, user_id)
    user.balance = float(balance)
    return user


def apply_stock_purchase(
    document: GameDocument,
    user_id: int,
    stock_id: int,
    price: Any,
    trust_client_price: bool = True,
) -> Holding:
    """Buy one unit of ``stock_id``.

    With ``trust_client_price`` the client's quoted price is charged, otherwise
    the catalog's current price. Repeat purchases add to the existing holding
    and keep the first buy price.
    """
    user = _user(document, user_id)
    stock = document.find_stock(stock_id)
    if stock is None:
        raise NotFoundError("Stock not found")
    if trust_client_price:
        charged = _quoted_price(price)
        if charged is None:
            raise ValidationError("Price must be a non-negative number")
    else:
        charged = stock.price
    if user.balance < charged:
        raise InsufficientFundsError(
            "Not enough money", details={"balance": user.balance, "price": charged}
        )

    user.balance -= charged
    holding = document.find_holding(user_id, stock_id)
    if holding is not None:
        holding.quantity += 1
        return holding
    holding = Holding(
        id=document.allocate_id("user_stock"),
        user_id=user_id,
        stock_id=stock_id,
        quantity=1,
        buy_price=charged,
    )
    document.user_stocks.append(holding)
    return holding


def iter_enriched_holdings(document: GameDocument, user_id: int) -> Iterator[EnrichedHolding]:
    for holding in document.user_stocks:
        if holding.user_id != user_id:
            continue
        stock = document.find_stock(holding.stock_id)
        if stock is None:
            log.warning("holding_without_stock", holding_id=holding.id, stock_id=holding.stock_id)
            continue
        yield EnrichedHolding(
            **holding.model_dump(),
            symbol=stock.symbol,
            name=stock.name,
            current_price=stock.price,
        )


async def record_click(store: DocumentStore, user_id: int) -> User:
    async with store.transaction() as document:
        user = apply_click(document, user_id)
    return user


async def purchase_upgrade(store: DocumentStore, user_id: int, upgrade_id: int | None) -> User:
    async with store.transaction() as document:
        upgrade = apply_upgrade_purchase(document, user_id, upgrade_id)
        user = _user(document, user_id)
    log.info(
        "upgrade_purchased",
        upgrade_id=upgrade.id,
        price=upgrade.price,
        income_per_click=user.income_per_click,
    )
    return user


async def sync_balance(store: DocumentStore, user_id: int, balance: Any) -> User:
    async with store.transaction() as document:
        user = apply_balance_sync(document, user_id, balance)
    return user


async def purchase_stock(store: DocumentStore, user_id: int, stock_id: int, price: Any) -> Holding:
    trust = get_settings().trust_client_stock_price
    async with store.transaction() as document:
        holding = apply_stock_purchase(document, user_id, stock_id, price, trust_client_price=trust)
    log.info("stock_purchased", stock_id=stock_id, quantity=holding.quantity, holding_id=holding.id)
    return holding


def list_holdings(document: GameDocument, user_id: int) -> list[EnrichedHolding]:
    return list(iter_enriched_holdings(document, user_id))
