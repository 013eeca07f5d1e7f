"""Decoding layer: maps actor wire payloads to domain models.

Wire conventions of the backend actor:
- variants are single-key objects:    {"Active": null}
- optionals are 0/1-length lists:     [] or [1712345678000000000]
- results are single-key objects:     {"Ok": null} or {"Err": "reason"}
- timestamps are nanoseconds since the Unix epoch
"""
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any, TypeVar

from src.es_common.datetime_utils import from_nanos
from src.es_common.enums import ChunkStatus, OrderStatus
from src.es_common.errors import PayloadDecodeError, StatusDecodeError
from src.es_common.usd import to_decimal
from src.es_order.domain.models import Chunk, MutationResult, Order

E = TypeVar("E", bound=Enum)


def decode_variant(raw: Any, enum_cls: type[E], kind: str) -> E:
    """Decode a tagged variant. Unknown or missing tags are hard errors."""
    if isinstance(raw, Mapping):
        if len(raw) != 1:
            raise StatusDecodeError(kind, raw)
        (tag,) = raw.keys()
    elif isinstance(raw, str):
        tag = raw
    else:
        raise StatusDecodeError(kind, raw)
    try:
        return enum_cls(tag)
    except ValueError:
        raise StatusDecodeError(kind, raw) from None


def decode_opt(raw: Any) -> Any:
    """[] -> None, [x] -> x. A bare value (already unwrapped) passes through."""
    if isinstance(raw, list):
        if len(raw) > 1:
            raise PayloadDecodeError(f"optional with {len(raw)} elements")
        return raw[0] if raw else None
    return raw


def _decimal(payload: Mapping[str, Any], key: str, default: Decimal | None = None) -> Decimal:
    if key not in payload or payload[key] is None:
        if default is None:
            raise PayloadDecodeError(f"missing field {key!r}")
        return default
    try:
        return to_decimal(payload[key])
    except ValueError as exc:
        raise PayloadDecodeError(f"field {key!r}: {exc}") from None


def _opt_decimal(payload: Mapping[str, Any], key: str) -> Decimal | None:
    value = decode_opt(payload.get(key, []))
    if value is None:
        return None
    try:
        return to_decimal(value)
    except ValueError as exc:
        raise PayloadDecodeError(f"field {key!r}: {exc}") from None


def _required(payload: Mapping[str, Any], key: str) -> Any:
    try:
        return payload[key]
    except KeyError:
        raise PayloadDecodeError(f"missing field {key!r}") from None


def _required_str(payload: Mapping[str, Any], key: str) -> str:
    """Non-empty string field. An empty deposit location would resolve to the caller's wallet."""
    value = str(_required(payload, key) or "")
    if not value:
        raise PayloadDecodeError(f"empty field {key!r}")
    return value


def decode_order(payload: Mapping[str, Any]) -> Order:
    funded_at = decode_opt(payload.get("funded_at", []))
    created_at = payload.get("created_at")
    return Order(
        id=int(_required(payload, "id")),
        amount_usd=_decimal(payload, "amount_usd"),
        max_bsv_price=_decimal(payload, "max_bsv_price"),
        status=decode_variant(_required(payload, "status"), OrderStatus, "order"),
        deposit_principal=_required_str(payload, "deposit_principal"),
        deposit_sub_id=_required_str(payload, "deposit_subaccount"),
        allow_partial_fill=bool(payload.get("allow_partial_fill", False)),
        funded_at=from_nanos(int(funded_at)) if funded_at is not None else None,
        activation_fee_usd=_opt_decimal(payload, "activation_fee_usd"),
        filler_incentive_reserved=_opt_decimal(payload, "filler_incentive_reserved"),
        total_deposited_usd=_opt_decimal(payload, "total_deposited_usd"),
        total_filled_usd=_decimal(payload, "total_filled_usd", Decimal("0")),
        total_locked_usd=_decimal(payload, "total_locked_usd", Decimal("0")),
        total_idle_usd=_decimal(payload, "total_idle_usd", Decimal("0")),
        total_refunded_usd=_opt_decimal(payload, "total_refunded_usd"),
        refund_count=len(payload.get("refund_attempts", [])),
        created_at=from_nanos(int(created_at)) if created_at else None,
    )


def decode_chunk(payload: Mapping[str, Any]) -> Chunk:
    locked_by = decode_opt(payload.get("locked_by", []))
    filled_at = decode_opt(payload.get("filled_at", []))
    return Chunk(
        id=int(_required(payload, "id")),
        order_id=int(_required(payload, "order_id")),
        amount_usd=_decimal(payload, "amount_usd"),
        status=decode_variant(_required(payload, "status"), ChunkStatus, "chunk"),
        locked_by=int(locked_by) if locked_by is not None else None,
        filled_at=from_nanos(int(filled_at)) if filled_at is not None else None,
    )


def decode_result(raw: Any) -> MutationResult:
    if not isinstance(raw, Mapping) or len(raw) != 1:
        raise PayloadDecodeError(f"result is not Ok/Err: {raw!r}")
    if "Ok" in raw:
        return MutationResult(ok=True)
    if "Err" in raw:
        return MutationResult(ok=False, error=str(raw["Err"]))
    raise PayloadDecodeError(f"result is not Ok/Err: {raw!r}")
