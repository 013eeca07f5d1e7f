"""Order creation pre-flight: size limits and the funds a maker must hold."""
from decimal import Decimal

from config.settings import settings
from src.es_common.errors import InvalidOrderAmountError
from src.es_common.usd import percent_of, with_percent
from src.es_reconcile.domain.fees import FeeSchedule


def check_order_amount(
    amount_usd: Decimal,
    min_chunk_usd: Decimal = settings.MIN_CHUNK_SIZE_USD,
    max_chunks: int = settings.MAX_CHUNKS_ALLOWED,
) -> None:
    """Raise InvalidOrderAmountError unless amount is a whole number of chunks within limits."""
    if not amount_usd.is_finite() or amount_usd <= 0:
        raise InvalidOrderAmountError(f"{amount_usd} must be greater than zero")
    if amount_usd < min_chunk_usd:
        raise InvalidOrderAmountError(f"{amount_usd} is below the minimum of ${min_chunk_usd}")
    if amount_usd % min_chunk_usd != 0:
        raise InvalidOrderAmountError(f"{amount_usd} must be a multiple of ${min_chunk_usd}")
    max_order = min_chunk_usd * max_chunks
    if amount_usd > max_order:
        raise InvalidOrderAmountError(
            f"{amount_usd} exceeds ${max_order} (max {max_chunks} chunks of ${min_chunk_usd})"
        )


def chunk_count_for(
    amount_usd: Decimal, min_chunk_usd: Decimal = settings.MIN_CHUNK_SIZE_USD
) -> int:
    return int(amount_usd // min_chunk_usd)


def required_wallet_funds(amount_usd: Decimal, fees: FeeSchedule) -> Decimal:
    """Order amount + maker fee + two ledger transfers (wallet -> deposit, deposit -> pool)."""
    return (
        amount_usd
        + percent_of(amount_usd, fees.maker_fee_percent)
        + fees.transfer_fee_usd * 2
    )


def buffered_max_price(
    market_price: Decimal, buffer_percent: Decimal = settings.BSV_PRICE_BUFFER_PERCENT
) -> Decimal:
    """Suggested ceiling: current BSV price plus a safety buffer."""
    return with_percent(market_price, buffer_percent)
