import asyncio
import inspect
import pathlib
import sys
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portfolio_tracker.database import build_engine, build_session_factory, init_db  # noqa: E402
from portfolio_tracker.price.base import (  # noqa: E402
    AssetDetail, PriceData, PriceNotFoundError, PricePoint, PriceProvider, SearchResult,
)
from portfolio_tracker.price.exchange_rate import ExchangeRateProvider  # noqa: E402
from portfolio_tracker.price.manager import PriceManager  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used in the suite."""

    config.addinivalue_line("markers", "asyncio: mark test as running in an asyncio event loop")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        kwargs = {name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames}
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            loop.run_until_complete(test_function(**kwargs))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        return True
    return None


class StubProvider(PriceProvider):
    """In-memory provider keyed by symbol."""

    def __init__(
        self,
        prices: dict[str, Decimal] | None = None,
        history: dict[str, list[PricePoint]] | None = None,
        currency: str = "USD",
    ) -> None:
        self.prices = prices or {}
        self.history = history or {}
        self.currency = currency
        self.price_calls: list[str] = []
        self.history_calls: list[str] = []

    async def get_current_price(self, symbol: str) -> PriceData:
        self.price_calls.append(symbol)
        if symbol not in self.prices:
            raise PriceNotFoundError(symbol)
        return PriceData(symbol=symbol, price=self.prices[symbol], currency=self.currency)

    async def get_historical_prices(self, symbol: str) -> list[PricePoint]:
        self.history_calls.append(symbol)
        if symbol not in self.history:
            raise PriceNotFoundError(symbol)
        return list(self.history[symbol])

    async def search_symbol(self, query: str) -> list[SearchResult]:
        return [SearchResult(symbol=s, name=s, currency=self.currency) for s in self.prices if query in s]

    async def get_details(self, symbol: str) -> AssetDetail:
        if symbol not in self.prices:
            raise PriceNotFoundError(symbol)
        return AssetDetail(symbol=symbol, price=self.prices[symbol], currency=self.currency)


class StubRateProvider(ExchangeRateProvider):
    def __init__(self, rate: Decimal) -> None:
        super().__init__()
        self.rate = rate

    async def get_usd_to_inr_rate(self) -> Decimal:
        return self.rate


@pytest.fixture
def stock_provider() -> StubProvider:
    return StubProvider(prices={"AAPL": Decimal("160.00"), "MSFT": Decimal("400.00")})


@pytest.fixture
def fund_provider() -> StubProvider:
    return StubProvider(prices={"119551": Decimal("60.00")}, currency="INR")


@pytest.fixture
def price_manager(stock_provider, fund_provider) -> PriceManager:
    return PriceManager(providers={"stock": stock_provider, "mutual_fund": fund_provider})


@pytest.fixture
def rate_provider() -> StubRateProvider:
    return StubRateProvider(Decimal("89.0"))


@pytest.fixture
def session_factory(tmp_path) -> async_sessionmaker[AsyncSession]:
    """File-backed SQLite so every event loop gets its own aiosqlite connection."""

    db_path = tmp_path / "portfolio.db"
    engine = build_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    asyncio.run(init_db(engine))
    return build_session_factory(engine)
