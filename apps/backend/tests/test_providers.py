from datetime import date
from decimal import Decimal

import httpx
import pytest

from portfolio_tracker.config import Settings
from portfolio_tracker.price.base import PriceNotFoundError, ProviderError
from portfolio_tracker.price.exchange_rate import ExchangeRateProvider
from portfolio_tracker.price.mutual_fund import MutualFundProvider, parse_nav
from portfolio_tracker.price.us_stock import USStockProvider

SETTINGS = Settings(default_usd_inr_rate=Decimal("89.0"))


def _client(handler, base_url=""):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=base_url)


def _fund_provider(handler):
    return MutualFundProvider(SETTINGS, client=_client(handler, SETTINGS.mfapi_base_url))


def test_parse_nav():
    assert parse_nav("1,234.5678") == Decimal("1234.5678")
    assert parse_nav(" 45.10 ") == Decimal("45.10")
    assert parse_nav("NA") is None
    assert parse_nav("") is None
    assert parse_nav("n/a") is None
    assert parse_nav(None) is None


@pytest.mark.asyncio
async def test_exchange_rate_uses_live_rate():
    def handler(request):
        return httpx.Response(200, json={"base": "USD", "rates": {"INR": 83.12, "EUR": 0.92}})

    provider = ExchangeRateProvider(SETTINGS, client=_client(handler))
    assert await provider.get_usd_to_inr_rate() == Decimal("83.12")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="boom"),
        httpx.Response(200, json={"rates": {"EUR": 0.92}}),
        httpx.Response(200, json={"rates": {"INR": 0}}),
        httpx.Response(200, text="not json"),
    ],
)
async def test_exchange_rate_falls_back_to_default(response):
    provider = ExchangeRateProvider(SETTINGS, client=_client(lambda request: response))
    assert await provider.get_usd_to_inr_rate() == Decimal("89.0")


@pytest.mark.asyncio
async def test_exchange_rate_network_error_falls_back_to_default():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    provider = ExchangeRateProvider(SETTINGS, client=_client(handler))
    assert await provider.get_usd_to_inr_rate() == Decimal("89.0")


@pytest.mark.asyncio
async def test_mutual_fund_current_nav():
    def handler(request):
        assert request.url.path == "/mf/119551"
        return httpx.Response(200, json={
            "meta": {"scheme_code": 119551},
            "data": [{"date": "17-10-2026", "nav": "1,234.5678"}],
        })

    provider = _fund_provider(handler)
    price = await provider.get_current_price("119551")

    assert price.price == Decimal("1234.5678")
    assert price.currency == "INR"
    await provider.close()


@pytest.mark.asyncio
async def test_mutual_fund_unparseable_nav_is_not_found():
    provider = _fund_provider(
        lambda request: httpx.Response(200, json={"data": [{"date": "17-10-2026", "nav": "NA"}]})
    )
    with pytest.raises(PriceNotFoundError):
        await provider.get_current_price("119551")


@pytest.mark.asyncio
async def test_mutual_fund_http_error_is_provider_error():
    provider = _fund_provider(lambda request: httpx.Response(503))
    with pytest.raises(ProviderError):
        await provider.get_current_price("119551")


@pytest.mark.asyncio
async def test_mutual_fund_history_falls_back_to_full_history():
    requests = []

    def handler(request):
        requests.append(request)
        if "startDate" in request.url.params:
            return httpx.Response(200, json={"data": []})
        return httpx.Response(200, json={"data": [
            {"date": "17-10-2026", "nav": "61.50"},
            {"date": "16-10-2026", "nav": "NA"},
            {"date": "bad-date", "nav": "60.00"},
            {"date": "15-10-2026", "nav": "60.75"},
        ]})

    provider = _fund_provider(handler)
    points = await provider.get_historical_prices("119551")

    assert len(requests) == 2
    assert [(p.date, p.price) for p in points] == [
        (date(2026, 10, 15), Decimal("60.75")),
        (date(2026, 10, 17), Decimal("61.50")),
    ]


@pytest.mark.asyncio
async def test_mutual_fund_history_keeps_thirty_points():
    entries = [
        {"date": f"{day:02d}-{month:02d}-2026", "nav": str(100 + day)}
        for month in (9, 8)
        for day in range(28, 0, -1)
    ]
    provider = _fund_provider(lambda request: httpx.Response(200, json={"data": entries}))
    points = await provider.get_historical_prices("119551")

    assert len(points) == 30
    assert points == sorted(points, key=lambda p: p.date)
    assert points[-1].date == date(2026, 9, 28)


@pytest.mark.asyncio
async def test_mutual_fund_search_limits_results():
    funds = [{"schemeCode": 100000 + i, "schemeName": f"Fund {i}"} for i in range(25)]

    def handler(request):
        assert request.url.params["q"] == "fund"
        return httpx.Response(200, json=funds)

    results = await _fund_provider(handler).search_symbol("fund")

    assert len(results) == 20
    assert results[0].symbol == "100000"
    assert results[0].asset_type == "MUTUAL_FUND"


@pytest.mark.asyncio
async def test_mutual_fund_details():
    def handler(request):
        assert request.url.path == "/mf/119551/latest"
        return httpx.Response(200, json={
            "meta": {
                "scheme_code": 119551,
                "scheme_name": "Aditya Birla Sun Life Banking & PSU Debt Fund",
                "fund_house": "Aditya Birla Sun Life Mutual Fund",
            },
            "data": [{"date": "17-10-2026", "nav": "350.12"}],
        })

    detail = await _fund_provider(handler).get_details("119551")

    assert detail.symbol == "119551"
    assert detail.price == Decimal("350.12")
    assert detail.as_of == "17-10-2026"
    assert detail.extra["fund_house"] == "Aditya Birla Sun Life Mutual Fund"


@pytest.mark.asyncio
async def test_stock_search_parses_quotes():
    def handler(request):
        return httpx.Response(200, json={"quotes": [
            {"symbol": "AAPL", "shortname": "Apple Inc.", "exchange": "NMS", "currency": "USD"},
            {"shortname": "no symbol"},
            {"symbol": "APLE", "longname": "Apple Hospitality REIT"},
        ]})

    provider = USStockProvider(SETTINGS, client=_client(handler))
    results = await provider.search_symbol("apple")

    assert [r.symbol for r in results] == ["AAPL", "APLE"]
    assert results[1].name == "Apple Hospitality REIT"
    assert results[0].asset_type == "STOCK"


@pytest.mark.asyncio
async def test_stock_search_failure_is_empty():
    provider = USStockProvider(SETTINGS, client=_client(lambda request: httpx.Response(429)))
    assert await provider.search_symbol("apple") == []
