"""
持倉估值引擎

將單筆持倉搭配即時報價與匯率，計算現價、市值、損益與報酬率，
並換算為報告幣別 (INR)。報價或匯率取得失敗時一律降級為安全預設值，不拋出例外。
"""

import logging
from collections.abc import Callable
from decimal import Decimal, ROUND_HALF_UP

from portfolio_tracker.config import get_settings
from portfolio_tracker.models.holding import AssetType, Holding, normalize_asset_type
from portfolio_tracker.schemas.holding import HoldingDetail

logger = logging.getLogger(__name__)

QuoteFn = Callable[[str, str], Decimal | None]
RateFn = Callable[[], Decimal]

TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")
HUNDRED = Decimal("100")

# 資產類型 -> (原幣代碼, 幣別符號)
CURRENCY_BY_ASSET_TYPE: dict[str, tuple[str, str]] = {
    AssetType.STOCK.value: ("USD", "$"),
    AssetType.MUTUAL_FUND.value: ("INR", "₹"),
}

REPORTING_CURRENCY = "INR"
REPORTING_CURRENCY_SYMBOL = "₹"


def round_money(amount: Decimal) -> Decimal:
    """金額與百分比的顯示精度：小數點後 2 位，四捨五入"""
    return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def percentage(part: Decimal, whole: Decimal) -> Decimal:
    """part 佔 whole 的百分比，保留 4 位小數；whole <= 0 時為 0"""
    if whole <= 0:
        return Decimal("0")
    return (part / whole * HUNDRED).quantize(FOUR_PLACES, rounding=ROUND_HALF_UP)


def currency_for(asset_type: str) -> tuple[str, str]:
    """回傳 (幣別代碼, 符號)；不支援的資產類型回傳空字串"""
    return CURRENCY_BY_ASSET_TYPE.get(asset_type, ("", ""))


def to_reporting_currency(amount: Decimal, asset_type: str, rate: Decimal) -> Decimal:
    """
    將原幣金額換算為 INR

    USD 計價者乘上匯率後四捨五入至 2 位；INR 與不支援的類型原值傳回，不做進位。
    """
    native_currency, _ = currency_for(asset_type)
    if native_currency == "USD":
        return round_money(amount * rate)
    return amount


def _resolve_price(symbol: str, asset_type: str, quote_fn: QuoteFn) -> Decimal:
    if asset_type not in CURRENCY_BY_ASSET_TYPE:
        logger.warning("不支援的資產類型 %r (%s)，現價以 0 計", asset_type, symbol)
        return Decimal("0")
    try:
        price = quote_fn(symbol, asset_type)
    except Exception as e:
        logger.warning("取得 %s 報價失敗，現價以 0 計: %s", symbol, e)
        return Decimal("0")
    if price is None:
        logger.warning("%s (%s) 無報價資料，現價以 0 計", symbol, asset_type)
        return Decimal("0")
    return price


def resolve_rate(rate_fn: RateFn) -> Decimal:
    """取得匯率；失敗或非正值時改用設定的預設匯率"""
    default_rate = get_settings().default_usd_inr_rate
    try:
        rate = rate_fn()
    except Exception as e:
        logger.warning("取得匯率失敗，使用預設值 %s: %s", default_rate, e)
        return default_rate
    if rate is None or rate <= 0:
        return default_rate
    return rate


def enrich_holding(holding: Holding, quote_fn: QuoteFn, rate_fn: RateFn) -> HoldingDetail:
    """
    計算單筆持倉的衍生欄位

    - 現值 = 現價 × 數量（2 位小數）
    - 損益 = 現值 − 成本，兩者皆先四捨五入至 2 位
    - 報酬率 = 損益 ÷ 成本 × 100（4 位小數），成本為 0 時為 0
    - INR 損益 = INR 現值 − INR 成本，分別換算後相減，避免重複進位誤差

    會將 holding.asset_type 就地正規化為大寫。
    """
    holding.asset_type = normalize_asset_type(holding.asset_type)
    asset_type = holding.asset_type

    current_price = _resolve_price(holding.symbol, asset_type, quote_fn)
    rate = resolve_rate(rate_fn)

    raw_current_value = current_price * holding.quantity
    raw_purchase_value = holding.purchase_price * holding.quantity

    current_value = round_money(raw_current_value)
    profit_loss = current_value - round_money(raw_purchase_value)
    profit_loss_pct = percentage(profit_loss, raw_purchase_value)

    currency, currency_symbol = currency_for(asset_type)

    current_value_inr = round_money(to_reporting_currency(raw_current_value, asset_type, rate))
    purchase_value_inr = round_money(to_reporting_currency(raw_purchase_value, asset_type, rate))

    return HoldingDetail(
        id=holding.id,
        asset_type=asset_type,
        symbol=holding.symbol,
        quantity=holding.quantity,
        purchase_price=holding.purchase_price,
        purchase_date=holding.purchase_date,
        category=holding.category,
        created_at=holding.created_at,
        current_price=current_price,
        current_value=current_value,
        profit_loss=profit_loss,
        profit_loss_percentage=profit_loss_pct,
        currency=currency,
        currency_symbol=currency_symbol,
        current_value_inr=current_value_inr,
        profit_loss_inr=current_value_inr - purchase_value_inr,
    )
