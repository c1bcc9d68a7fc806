from datetime import date
from decimal import Decimal

import pytest

from conftest import StubProvider
from portfolio_tracker.price.base import PriceNotFoundError, PricePoint
from portfolio_tracker.price.manager import PriceManager


def test_candidate_providers_follow_asset_type(price_manager, stock_provider, fund_provider):
    assert price_manager.candidate_providers("STOCK") == [stock_provider]
    assert price_manager.candidate_providers("mf") == [fund_provider]
    assert price_manager.candidate_providers(None) == [stock_provider, fund_provider]
    assert price_manager.candidate_providers("UNKNOWN") == [stock_provider, fund_provider]


@pytest.mark.asyncio
async def test_get_price_routes_by_asset_type(price_manager):
    price = await price_manager.get_price("119551", "MUTUAL_FUND")
    assert price.price == Decimal("60.00")
    assert price.currency == "INR"


@pytest.mark.asyncio
async def test_get_price_rejects_unsupported_asset_type(price_manager):
    with pytest.raises(PriceNotFoundError):
        await price_manager.get_price("BTC", "CRYPTO")


@pytest.mark.asyncio
async def test_batch_prices_fall_back_to_zero(price_manager, stock_provider):
    prices = await price_manager.get_prices_batch([
        ("AAPL", "STOCK"),
        ("MISSING", "STOCK"),
        ("BTC", "CRYPTO"),
        ("AAPL", "STOCK"),
    ])

    assert prices == {
        ("AAPL", "STOCK"): Decimal("160.00"),
        ("MISSING", "STOCK"): Decimal("0"),
        ("BTC", "CRYPTO"): Decimal("0"),
    }
    assert stock_provider.price_calls == ["AAPL", "MISSING"]


@pytest.mark.asyncio
async def test_historical_stops_at_first_provider_with_data():
    points = [PricePoint(symbol="AAPL", date=date(2026, 10, 1), price=Decimal("170"))]
    stock = StubProvider(history={"AAPL": points})
    fund = StubProvider(history={"AAPL": points}, currency="INR")
    manager = PriceManager(providers={"stock": stock, "mutual_fund": fund})

    assert await manager.get_historical("AAPL", None) == points
    assert fund.history_calls == []


@pytest.mark.asyncio
async def test_historical_falls_through_to_mutual_fund():
    points = [PricePoint(symbol="119551", date=date(2026, 10, 1), price=Decimal("61.2"))]
    stock = StubProvider()
    fund = StubProvider(history={"119551": points}, currency="INR")
    manager = PriceManager(providers={"stock": stock, "mutual_fund": fund})

    assert await manager.get_historical("119551", "") == points
    assert stock.history_calls == ["119551"]


@pytest.mark.asyncio
async def test_historical_with_known_type_does_not_fall_through():
    points = [PricePoint(symbol="119551", date=date(2026, 10, 1), price=Decimal("61.2"))]
    fund = StubProvider(history={"119551": points}, currency="INR")
    manager = PriceManager(providers={"stock": StubProvider(), "mutual_fund": fund})

    assert await manager.get_historical("119551", "STOCK") == []
    assert fund.history_calls == []


@pytest.mark.asyncio
async def test_search_with_unsupported_type_is_empty(price_manager):
    assert await price_manager.search_symbol("AA", "CRYPTO") == []
    results = await price_manager.search_symbol("AA", "STOCK")
    assert [r.symbol for r in results] == ["AAPL"]


@pytest.mark.asyncio
async def test_lookups_share_asset_type_routing(price_manager):
    detail = await price_manager.get_details("119551", " mutual-fund ")
    assert detail.currency == "INR"

    results = await price_manager.search_symbol("1195", "mf")
    assert [r.symbol for r in results] == ["119551"]

    with pytest.raises(PriceNotFoundError):
        await price_manager.get_details("BTC", "CRYPTO")
