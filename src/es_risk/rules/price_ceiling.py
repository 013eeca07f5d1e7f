from decimal import Decimal

from src.es_common.errors import InvalidMaxPriceError
from src.es_common.usd import to_decimal


def check_max_price(value: object) -> Decimal:
    """Return the ceiling as Decimal; raise InvalidMaxPriceError(4001) unless finite and > 0."""
    try:
        price = to_decimal(value)
    except ValueError:
        raise InvalidMaxPriceError(value) from None
    if not price.is_finite() or price <= 0:
        raise InvalidMaxPriceError(value)
    return price
