"""Economy transitions: clicks, upgrades, balance sync, stock purchases."""

import asyncio
import math

import pytest

from clickergame.core.exceptions import (
    InsufficientFundsError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from clickergame.services import economy
from clickergame.services import users as user_service

pytestmark = pytest.mark.asyncio


async def _new_user(store, name="alice") -> int:
    return await user_service.register(store, name, "secret")


async def _set_balance(store, user_id, balance):
    async with store.transaction() as doc:
        doc.find_user(user_id).balance = balance


async def test_click_adds_income_per_click(store):
    uid = await _new_user(store)
    user = await economy.record_click(store, uid)
    assert user.balance == 101.00


async def test_sequential_clicks_interleaved_with_other_users(store):
    alice = await _new_user(store, "alice")
    bob = await _new_user(store, "bob")
    for _ in range(5):
        await economy.record_click(store, alice)
        await economy.record_click(store, bob)
        await economy.sync_balance(store, bob, 7)
    assert (await store.load()).find_user(alice).balance == 105.00


async def test_concurrent_clicks_are_not_lost(store):
    uid = await _new_user(store)
    await asyncio.gather(*(economy.record_click(store, uid) for _ in range(20)))
    assert (await store.load()).find_user(uid).balance == 120.00


async def test_scenario_click_and_upgrades(store):
    uid = await _new_user(store)
    await economy.record_click(store, uid)
    user = await economy.purchase_upgrade(store, uid, 1)
    assert user.balance == 51.00
    assert user.income_per_click == 3.00
    assert user.auto_income_per_second == 1.00

    with pytest.raises(InsufficientFundsError):
        await economy.purchase_upgrade(store, uid, 3)
    user = (await store.load()).find_user(uid)
    assert user.balance == 51.00
    assert user.income_per_click == 3.00


async def test_upgrade_stacks_when_bought_twice(store):
    uid = await _new_user(store)
    await economy.purchase_upgrade(store, uid, 1)
    user = await economy.purchase_upgrade(store, uid, 1)
    assert user.balance == 0.00
    assert user.income_per_click == 5.00
    assert user.auto_income_per_second == 2.00


async def test_upgrade_insufficient_for_single_purchase(store):
    uid = await _new_user(store)
    with pytest.raises(InsufficientFundsError):
        await economy.purchase_upgrade(store, uid, 2)
    assert (await store.load()).find_user(uid).balance == 100.00


async def test_unknown_upgrade(store):
    uid = await _new_user(store)
    with pytest.raises(NotFoundError):
        await economy.purchase_upgrade(store, uid, 99)


async def test_sync_balance_overwrites(store):
    uid = await _new_user(store)
    user = await economy.sync_balance(store, uid, 1234.5)
    assert user.balance == 1234.5


@pytest.mark.parametrize("value", ["12", None, True, math.nan, math.inf, [1], 10**400])
async def test_sync_balance_rejects_non_numbers(store, value):
    uid = await _new_user(store)
    with pytest.raises(ValidationError):
        await economy.sync_balance(store, uid, value)
    assert (await store.load()).find_user(uid).balance == 100.00


async def test_scenario_stock_purchase(store):
    uid = await _new_user(store)
    await _set_balance(store, uid, 51.00)
    with pytest.raises(InsufficientFundsError):
        await economy.purchase_stock(store, uid, 1, 50000.00)
    assert (await store.load()).user_stocks == []

    await _set_balance(store, uid, 60000.00)
    holding = await economy.purchase_stock(store, uid, 1, 50000.00)
    assert holding.quantity == 1
    assert holding.buy_price == 50000.00

    await _set_balance(store, uid, 60000.00)
    holding = await economy.purchase_stock(store, uid, 1, 50001.00)
    assert holding.quantity == 2
    assert holding.buy_price == 50000.00

    doc = await store.load()
    assert len(doc.user_stocks) == 1
    assert doc.find_user(uid).balance == 9999.00


async def test_stock_purchase_creates_one_holding_per_stock(store):
    uid = await _new_user(store)
    await economy.purchase_stock(store, uid, 3, 1.0)
    await economy.purchase_stock(store, uid, 4, 2.0)
    await economy.purchase_stock(store, uid, 3, 1.5)
    doc = await store.load()
    assert sorted((h.stock_id, h.quantity) for h in doc.user_stocks) == [(3, 2), (4, 1)]
    assert [h.id for h in doc.user_stocks] == [1, 2]


async def test_stock_purchase_validation(store):
    uid = await _new_user(store)
    with pytest.raises(NotFoundError):
        await economy.purchase_stock(store, uid, 42, 1.0)
    with pytest.raises(ValidationError):
        await economy.purchase_stock(store, uid, 1, -5)
    with pytest.raises(ValidationError):
        await economy.purchase_stock(store, uid, 1, None)
    with pytest.raises(ValidationError):
        await economy.purchase_stock(store, uid, 1, True)
    with pytest.raises(ValidationError):
        await economy.purchase_stock(store, uid, 1, 10**400)
    assert (await store.load()).find_user(uid).balance == 100.00


async def test_stock_purchase_with_catalog_price(store):
    uid = await _new_user(store)
    async with store.transaction() as doc:
        holding = economy.apply_stock_purchase(doc, uid, 5, 0.0, trust_client_price=False)
    assert holding.buy_price == 0.50
    assert (await store.load()).find_user(uid).balance == 99.50


async def test_list_holdings_joins_live_catalog(store):
    uid = await _new_user(store)
    other = await _new_user(store, "bob")
    await economy.purchase_stock(store, uid, 5, 0.5)
    await economy.purchase_stock(store, other, 4, 80)
    async with store.transaction() as doc:
        doc.find_stock(5).price = 0.75

    doc = await store.load()
    holdings = economy.list_holdings(doc, uid)
    assert len(holdings) == 1
    h = holdings[0]
    assert (h.symbol, h.name, h.current_price, h.buy_price, h.quantity) == ("ADA", "Cardano", 0.75, 0.5, 1)


async def test_enriched_holdings_iterator_is_single_pass(store):
    uid = await _new_user(store)
    await economy.purchase_stock(store, uid, 5, 0.5)
    it = economy.iter_enriched_holdings(await store.load(), uid)
    assert len(list(it)) == 1
    assert list(it) == []


async def test_transition_for_missing_user(store):
    doc = await store.load()
    with pytest.raises(UnauthorizedError):
        economy.apply_click(doc, 999)


async def test_stock_purchase_accepts_numeric_string_price(store):
    uid = await _new_user(store)
    holding = await economy.purchase_stock(store, uid, 5, "0.50")
    assert holding.buy_price == 0.5
    assert (await store.load()).find_user(uid).balance == 99.5
