"""
匯率提供者

取得 USD → INR 即時匯率；API 失敗或回傳非正值時改用設定中的預設匯率。
"""

import logging
from decimal import Decimal, InvalidOperation

import httpx

from portfolio_tracker.config import Settings, get_settings

logger = logging.getLogger(__name__)


class ExchangeRateProvider:
    """
    USD/INR 匯率提供者

    使用方式：
        provider = ExchangeRateProvider()
        rate = await provider.get_usd_to_inr_rate()
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._settings = settings or get_settings()
        self._client = client

    @property
    def default_rate(self) -> Decimal:
        return self._settings.default_usd_inr_rate

    async def get_usd_to_inr_rate(self) -> Decimal:
        """取得匯率，永不拋出例外"""
        live_rate = await self._fetch_live_rate()
        if live_rate is not None and live_rate > 0:
            return live_rate
        logger.warning("取得即時匯率失敗，使用預設值 %s", self.default_rate)
        return self.default_rate

    async def _fetch_live_rate(self) -> Decimal | None:
        try:
            if self._client is not None:
                response = await self._client.get(self._settings.exchange_rate_url)
            else:
                async with httpx.AsyncClient(timeout=self._settings.http_timeout) as client:
                    response = await client.get(self._settings.exchange_rate_url)
            response.raise_for_status()
            rates = response.json().get("rates") or {}
            if "INR" in rates:
                return Decimal(str(rates["INR"]))
        except (httpx.HTTPError, ValueError, InvalidOperation, AttributeError) as e:
            logger.warning("取得 USD/INR 匯率失敗: %s", e)
        return None


def get_exchange_rate_provider() -> ExchangeRateProvider:
    """FastAPI 依賴注入：取得匯率提供者"""
    return ExchangeRateProvider()
