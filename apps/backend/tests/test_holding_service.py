from datetime import date
from decimal import Decimal

import pytest

from portfolio_tracker.schemas.holding import HoldingCreate, HoldingUpdate
from portfolio_tracker.services.holding_service import HoldingService


def _create(**overrides):
    data = {
        "asset_type": "STOCK",
        "symbol": "AAPL",
        "quantity": Decimal("10"),
        "purchase_price": Decimal("150.00"),
        "purchase_date": date(2024, 1, 2),
        "category": "Technology",
    }
    data.update(overrides)
    return HoldingCreate(**data)


@pytest.mark.asyncio
async def test_create_normalizes_asset_type_and_symbol(session_factory):
    async with session_factory() as session:
        holding = await HoldingService(session).create_holding(
            _create(asset_type="mutual-fund", symbol=" 119551 ", category="")
        )
        await session.commit()

    assert holding.id
    assert holding.created_at is not None
    assert holding.asset_type == "MUTUAL_FUND"
    assert holding.symbol == "119551"
    assert holding.category is None


@pytest.mark.asyncio
async def test_update_replaces_fields_but_keeps_identity(session_factory):
    async with session_factory() as session:
        service = HoldingService(session)
        created = await service.create_holding(_create())
        await session.commit()
        holding_id, created_at = created.id, created.created_at

    async with session_factory() as session:
        updated = await HoldingService(session).update_holding(holding_id, HoldingUpdate(
            asset_type="stock",
            symbol="MSFT",
            quantity=Decimal("3"),
            purchase_price=Decimal("300"),
        ))
        await session.commit()

    assert updated.id == holding_id
    assert updated.created_at == created_at
    assert updated.symbol == "MSFT"
    assert updated.quantity == Decimal("3")
    assert updated.purchase_date is None
    assert updated.category is None


@pytest.mark.asyncio
async def test_update_missing_holding_returns_none(session_factory):
    async with session_factory() as session:
        assert await HoldingService(session).update_holding("missing", HoldingUpdate(
            asset_type="STOCK", symbol="AAPL", quantity=Decimal("1"), purchase_price=Decimal("1"),
        )) is None


@pytest.mark.asyncio
async def test_delete_holding(session_factory):
    async with session_factory() as session:
        service = HoldingService(session)
        holding = await service.create_holding(_create())
        await session.commit()

        assert await service.delete_holding(holding.id) is True
        await session.commit()
        assert await service.delete_holding(holding.id) is False
        assert await service.get_holding(holding.id) is None


@pytest.mark.asyncio
async def test_list_by_asset_type_and_distinct_symbols(session_factory):
    async with session_factory() as session:
        service = HoldingService(session)
        await service.create_holding(_create())
        await service.create_holding(_create(quantity=Decimal("5")))
        await service.create_holding(_create(asset_type="MF", symbol="119551", category=None))
        await session.commit()

        assert len(await service.list_holdings()) == 3
        stocks = await service.list_by_asset_type("stock")
        funds = await service.list_by_asset_type("MUTUAL_FUND")
        symbols = await service.distinct_symbols()

    assert [h.symbol for h in stocks] == ["AAPL", "AAPL"]
    assert [h.symbol for h in funds] == ["119551"]
    assert sorted(symbols) == [("119551", "MUTUAL_FUND"), ("AAPL", "STOCK")]
