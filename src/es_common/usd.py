"""Decimal arithmetic utilities for USD amounts.

All amounts, balances and fees are Decimal. Floats coming off the wire are
converted through their string form so 96.3 stays 96.3, not 96.2999...
ckUSDC ledger balances are integers in e6s (1 USD = 1_000_000 e6s).
"""

from decimal import Decimal, InvalidOperation

E6S_PER_USD = 1_000_000
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: object) -> Decimal:
    """Convert int/float/str/Decimal to Decimal. Raises ValueError on junk."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a numeric amount: {value!r}")
    if isinstance(value, (int, float, str)):
        try:
            return Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"Not a numeric amount: {value!r}") from exc
    raise ValueError(f"Not a numeric amount: {value!r}")


def percent_of(amount: Decimal, percent: Decimal) -> Decimal:
    """amount * percent / 100."""
    return amount * percent / HUNDRED


def with_percent(amount: Decimal, percent: Decimal) -> Decimal:
    """amount * (1 + percent / 100)."""
    return amount * (1 + percent / HUNDRED)


def e6s_to_usd(e6s: int) -> Decimal:
    return Decimal(e6s) / E6S_PER_USD


def usd_to_display(amount: Decimal, decimals: int = 6) -> str:
    """Format for display: Decimal('96.3') -> '$96.300000', negatives as '-$1.50'."""
    quantum = Decimal(1).scaleb(-decimals)
    rounded = abs(amount).quantize(quantum)
    sign = "-" if amount < 0 else ""
    return f"{sign}${rounded:,.{decimals}f}"
