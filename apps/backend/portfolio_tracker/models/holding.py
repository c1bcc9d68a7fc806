"""
持倉模型

紀錄使用者持有的單一標的（股票或共同基金）：數量、買入價格與日期。
現價、市值、損益等衍生欄位不落地，每次讀取時重新計算。
"""

import enum
import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import String, Date, DateTime, Numeric, func
from sqlalchemy.orm import Mapped, mapped_column

from portfolio_tracker.database import Base


class AssetType(str, enum.Enum):
    """資產類型列舉"""
    STOCK = "STOCK"              # 美股，以 USD 報價
    MUTUAL_FUND = "MUTUAL_FUND"  # 印度共同基金，以 INR 報價


# 寫入時可接受的別名
ASSET_TYPE_ALIASES: dict[str, str] = {
    "MUTUAL-FUND": AssetType.MUTUAL_FUND.value,
    "MUTUAL FUND": AssetType.MUTUAL_FUND.value,
    "MF": AssetType.MUTUAL_FUND.value,
}


def normalize_asset_type(asset_type: str | None) -> str:
    """
    將資產類型正規化為大寫標準形式。

    已知別名（MF、MUTUAL-FUND）轉為 MUTUAL_FUND；
    其他值僅轉大寫後原樣保留（報價時視為不支援）。
    """
    if asset_type is None:
        return ""
    normalized = asset_type.strip().upper()
    return ASSET_TYPE_ALIASES.get(normalized, normalized)


class Holding(Base):
    __tablename__ = "holdings"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    asset_type: Mapped[str] = mapped_column(
        String(20), nullable=False, index=True,
        comment="資產類型，如 STOCK, MUTUAL_FUND",
    )
    symbol: Mapped[str] = mapped_column(
        String(50), nullable=False, index=True,
        comment="股票代碼或基金 scheme code",
    )
    quantity: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=8), nullable=False,
        comment="持有數量",
    )
    purchase_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=18, scale=4), nullable=False,
        comment="買入單價（原幣）",
    )
    purchase_date: Mapped[date | None] = mapped_column(
        Date, nullable=True,
    )
    category: Mapped[str | None] = mapped_column(
        String(100), nullable=True,
        comment="產業類別，用於分散度分析",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Holding {self.asset_type}:{self.symbol} qty={self.quantity}>"
