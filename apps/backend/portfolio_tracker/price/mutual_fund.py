"""
印度共同基金報價提供者

透過 MFAPI (https://www.mfapi.in) 公開 API 取得基金淨值 (NAV)。
標的代碼為 AMFI scheme code，淨值以 INR 計價，無需 API Key。
"""

import logging
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation

import httpx

from portfolio_tracker.config import Settings, get_settings
from portfolio_tracker.price.base import (
    PriceProvider, PriceData, PricePoint, AssetDetail,
    PriceNotFoundError, ProviderError, SearchResult,
)

logger = logging.getLogger(__name__)

# MFAPI 日期格式，例如 "17-10-2026"
MFAPI_DATE_FORMAT = "%d-%m-%Y"

# 歷史淨值最多取 30 筆
HISTORY_POINTS = 30

# 搜尋結果上限
MAX_SEARCH_RESULTS = 20


def parse_nav(raw: str | None) -> Decimal | None:
    """解析淨值字串，移除千分位逗號；NA 或非數字回傳 None"""
    if raw is None:
        return None
    cleaned = str(raw).replace(",", "").strip()
    if not cleaned or cleaned.upper() == "NA":
        return None
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


class MutualFundProvider(PriceProvider):
    """MFAPI 共同基金報價提供者"""

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        settings = settings or get_settings()
        self._client = client or httpx.AsyncClient(
            base_url=settings.mfapi_base_url,
            timeout=settings.http_timeout,
            headers={"Accept": "application/json"},
        )

    async def _get_json(self, path: str, params: dict | None = None):
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            raise ProviderError(f"MFAPI 錯誤: {e}") from e
        except ValueError as e:
            raise ProviderError(f"MFAPI 回應格式錯誤: {e}") from e

    async def get_current_price(self, symbol: str) -> PriceData:
        """取得基金最新淨值"""
        data = await self._get_json(f"/mf/{symbol}")
        entries = data.get("data") if isinstance(data, dict) else None
        if not entries:
            raise PriceNotFoundError(f"找不到基金 {symbol} 的淨值")

        nav = parse_nav(entries[0].get("nav"))
        if nav is None:
            raise PriceNotFoundError(f"基金 {symbol} 淨值無法解析")

        return PriceData(
            symbol=symbol,
            price=nav,
            currency="INR",
            timestamp=datetime.now(),
            source="mfapi",
        )

    async def get_historical_prices(self, symbol: str) -> list[PricePoint]:
        """
        取得基金近 30 日淨值

        先以日期區間查詢；若回應為空，改查完整歷史。
        MFAPI 回傳由新到舊，取前 30 筆有效資料後依日期排序。
        """
        end_date = date.today()
        start_date = end_date - timedelta(days=30)
        data = await self._get_json(
            f"/mf/{symbol}",
            params={"startDate": start_date.isoformat(), "endDate": end_date.isoformat()},
        )
        if not isinstance(data, dict) or not data.get("data"):
            logger.info("基金 %s 區間查詢無資料，改查完整歷史", symbol)
            data = await self._get_json(f"/mf/{symbol}")

        entries = data.get("data") if isinstance(data, dict) else None
        if not entries:
            raise PriceNotFoundError(f"找不到基金 {symbol} 的歷史淨值")

        prices: list[PricePoint] = []
        for entry in entries:
            if len(prices) >= HISTORY_POINTS:
                break
            nav = parse_nav(entry.get("nav"))
            if nav is None:
                continue
            try:
                nav_date = datetime.strptime(entry.get("date", ""), MFAPI_DATE_FORMAT).date()
            except (TypeError, ValueError):
                continue
            prices.append(PricePoint(symbol=symbol, date=nav_date, price=nav))

        prices.sort(key=lambda p: p.date)
        return prices

    async def get_details(self, symbol: str) -> AssetDetail:
        """取得基金基本資料與最新淨值"""
        data = await self._get_json(f"/mf/{symbol}/latest")
        if not isinstance(data, dict) or not data:
            raise PriceNotFoundError(f"找不到基金 {symbol}")

        meta = data.get("meta") or {}
        detail = AssetDetail(
            symbol=str(meta.get("scheme_code") or symbol),
            name=meta.get("scheme_name"),
            currency="INR",
            extra={
                "fund_house": meta.get("fund_house"),
                "scheme_type": meta.get("scheme_type"),
                "scheme_category": meta.get("scheme_category"),
            },
        )
        entries = data.get("data") or []
        if entries:
            detail.price = parse_nav(entries[0].get("nav"))
            detail.as_of = entries[0].get("date")
        return detail

    async def search_symbol(self, query: str) -> list[SearchResult]:
        """依基金名稱搜尋 scheme code"""
        if not query:
            return []
        try:
            data = await self._get_json("/mf/search", params={"q": query})
        except ProviderError as e:
            logger.warning("MFAPI 搜尋失敗: %s", e)
            return []

        if not isinstance(data, list):
            return []

        return [
            SearchResult(
                symbol=str(fund.get("schemeCode", "")),
                name=fund.get("schemeName", ""),
                currency="INR",
                asset_type="MUTUAL_FUND",
            )
            for fund in data[:MAX_SEARCH_RESULTS]
        ]

    async def close(self) -> None:
        """關閉 HTTP 連線"""
        await self._client.aclose()
