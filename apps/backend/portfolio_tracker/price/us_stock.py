"""
美股報價提供者

透過 Yahoo Finance (yfinance) 取得美股即時與歷史價格。
yfinance 為開源套件，無需 API Key；標的搜尋則直接呼叫 Yahoo 搜尋 API。
"""

import asyncio
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any

import httpx

from portfolio_tracker.config import Settings, get_settings
from portfolio_tracker.price.base import (
    PriceProvider, PriceData, PricePoint, AssetDetail,
    PriceNotFoundError, ProviderError, SearchResult,
)

logger = logging.getLogger(__name__)

# 搜尋結果上限
MAX_SEARCH_RESULTS = 15


def _to_decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    try:
        return Decimal(str(round(float(value), 4)))
    except (TypeError, ValueError):
        return None


class USStockProvider(PriceProvider):
    """Yahoo Finance 美股報價提供者"""

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._settings = settings or get_settings()
        self._client = client

    async def get_current_price(self, symbol: str) -> PriceData:
        """取得美股即時報價（使用 yfinance）"""
        try:
            # yfinance 是同步 API，需用 run_in_executor 包裝
            loop = asyncio.get_event_loop()
            return await loop.run_in_executor(None, self._fetch_price, symbol)
        except PriceNotFoundError:
            raise
        except Exception as e:
            raise ProviderError(f"Yahoo Finance 錯誤: {e}") from e

    def _fetch_price(self, symbol: str) -> PriceData:
        """同步取得報價（在 executor 中執行）"""
        import yfinance as yf

        ticker = yf.Ticker(symbol)
        try:
            price = ticker.fast_info.last_price
        except Exception as e:
            raise PriceNotFoundError(f"找不到 {symbol} 的報價") from e

        if price is None:
            raise PriceNotFoundError(f"找不到 {symbol} 的報價")

        return PriceData(
            symbol=symbol.upper(),
            price=_to_decimal(price),
            currency="USD",
            timestamp=datetime.now(),
            source="yahoo_finance",
        )

    async def get_historical_prices(self, symbol: str) -> list[PricePoint]:
        """取得美股近一個月每日收盤價"""
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, self._fetch_historical, symbol)

    def _fetch_historical(self, symbol: str) -> list[PricePoint]:
        """同步取得歷史報價"""
        import yfinance as yf

        ticker = yf.Ticker(symbol)
        df = ticker.history(period="1mo", interval="1d")

        if df.empty:
            raise PriceNotFoundError(f"找不到 {symbol} 的歷史報價")

        prices = []
        for idx, row in df.iterrows():
            close = _to_decimal(row.get("Close"))
            # 停牌日可能沒有收盤價
            if close is None or close.is_nan():
                continue
            prices.append(PricePoint(
                symbol=symbol,
                date=idx.to_pydatetime().date(),
                price=close,
            ))
        prices.sort(key=lambda p: p.date)
        return prices

    async def get_details(self, symbol: str) -> AssetDetail:
        """取得美股當日行情（開高低收、成交量、漲跌）"""
        loop = asyncio.get_event_loop()
        try:
            return await loop.run_in_executor(None, self._fetch_details, symbol)
        except PriceNotFoundError:
            raise
        except Exception as e:
            raise ProviderError(f"Yahoo Finance 錯誤: {e}") from e

    def _fetch_details(self, symbol: str) -> AssetDetail:
        import yfinance as yf

        info = yf.Ticker(symbol).fast_info
        price = _to_decimal(info.last_price)
        if price is None:
            raise PriceNotFoundError(f"找不到 {symbol} 的報價")

        previous_close = _to_decimal(info.previous_close)
        change = None
        change_pct = None
        if previous_close and previous_close > 0:
            change = price - previous_close
            change_pct = (change / previous_close * 100).quantize(Decimal("0.0001"))

        return AssetDetail(
            symbol=symbol.upper(),
            price=price,
            currency=info.currency,
            extra={
                "open": _to_decimal(info.open),
                "high": _to_decimal(info.day_high),
                "low": _to_decimal(info.day_low),
                "volume": _to_decimal(info.last_volume),
                "previous_close": previous_close,
                "change": change,
                "change_percent": change_pct,
            },
        )

    async def search_symbol(self, query: str) -> list[SearchResult]:
        """搜尋美股標的"""
        if not query:
            return []

        params = {"q": query, "quotesCount": MAX_SEARCH_RESULTS, "newsCount": 0}
        try:
            if self._client is not None:
                response = await self._client.get(self._settings.yahoo_search_url, params=params)
            else:
                async with httpx.AsyncClient(
                    timeout=self._settings.http_timeout,
                    headers={"User-Agent": "Mozilla/5.0"},
                ) as client:
                    response = await client.get(self._settings.yahoo_search_url, params=params)
            response.raise_for_status()
            data = response.json()
        except Exception as e:
            logger.warning("Yahoo Finance 搜尋失敗: %s", e)
            return []

        results = []
        for quote in data.get("quotes", []):
            symbol = quote.get("symbol", "")
            if not symbol:
                continue
            results.append(SearchResult(
                symbol=symbol,
                name=quote.get("shortname") or quote.get("longname") or "",
                exchange=quote.get("exchange"),
                currency=quote.get("currency"),
                asset_type="STOCK",
            ))
            if len(results) >= MAX_SEARCH_RESULTS:
                break
        return results
