"""
背景歷史價格同步器 (Background History Worker)

使用 APScheduler 定期從資料庫撈取所有持倉中不重複的標的，
向報價來源抓取近一個月歷史價格並寫入資料庫（已存在的日期略過）。
"""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from portfolio_tracker.config import get_settings
from portfolio_tracker.database import async_session
from portfolio_tracker.price.manager import PriceManager
from portfolio_tracker.services.historical_price_service import HistoricalPriceService
from portfolio_tracker.services.holding_service import HoldingService

logger = logging.getLogger(__name__)

# 使用 AsyncIOScheduler
scheduler = AsyncIOScheduler()


async def sync_historical_prices(session_factory=async_session, manager: PriceManager | None = None):
    """
    背景排程任務：對所有持倉標的抓取並儲存歷史價格

    單一標的失敗不影響其他標的。
    """
    logger.info("開始背景同步歷史價格...")
    owns_manager = manager is None
    manager = manager or PriceManager()

    try:
        async with session_factory() as session:
            items = await HoldingService(session).distinct_symbols()
            if not items:
                logger.info("目前沒有任何持倉標的需要同步。")
                return

            service = HistoricalPriceService(session, manager)
            for symbol, asset_type in items:
                await service.fetch_and_store(symbol, asset_type)

            await session.commit()
            logger.info("背景同步歷史價格完成 (共 %d 筆不重複標的)", len(items))
    except Exception as e:
        logger.error("背景同步歷史價格失敗: %s", e)
    finally:
        if owns_manager:
            await manager.close()


def setup_worker():
    """設定並啟動排程器"""
    settings = get_settings()
    scheduler.add_job(
        sync_historical_prices,
        'interval',
        hours=settings.history_sync_interval_hours,
        id='sync_historical_prices_job',
        replace_existing=True,
    )
    scheduler.start()
    logger.info("背景歷史價格同步器 (Background Worker) 已啟動")


def stop_worker():
    """停止排程器"""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("背景歷史價格同步器已關閉")
