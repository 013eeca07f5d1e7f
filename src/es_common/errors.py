"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Order data (lookup, decoding)
  2xxx: Balance
  3xxx: Backend mutations
  4xxx: Action preconditions
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Order data ---

class OrderNotFoundError(AppError):
    def __init__(self, order_id: int) -> None:
        super().__init__(1001, f"Order not found: {order_id}", 404)


class StatusDecodeError(AppError):
    """An incoming status tag is not one of the known variants."""

    def __init__(self, kind: str, raw: object) -> None:
        super().__init__(1002, f"Unrecognised {kind} status: {raw!r}", 502)


class PayloadDecodeError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1003, f"Malformed actor payload: {detail}", 502)


# --- 2xxx: Balance ---

class BalanceUnavailableError(AppError):
    """No balance observation could be made; figures would be stale."""

    def __init__(self, order_id: int) -> None:
        super().__init__(
            2001, f"Order deposit balance unavailable for order {order_id}", 503
        )


# --- 3xxx: Backend mutations ---

class MutationRejectedError(AppError):
    """The backend answered Err(message). The message is surfaced verbatim."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(3001, reason, 422)


class TransientFetchFailureError(AppError):
    """A call to the actor or ledger raised instead of answering."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(3002, f"{operation} failed, please refresh and retry", 503)


# --- 4xxx: Action preconditions ---

class InvalidMaxPriceError(AppError):
    def __init__(self, value: object) -> None:
        super().__init__(4001, f"Max BSV price must be a positive number, got {value!r}", 422)


class PriceNotEditableError(AppError):
    def __init__(self, order_id: int, reason: str = "no Available or Idle chunks") -> None:
        super().__init__(4002, f"Order {order_id} price cannot be updated: {reason}", 422)


class OrderNotCancellableError(AppError):
    def __init__(self, order_id: int, status: str) -> None:
        super().__init__(4003, f"Order {order_id} in status {status} cannot be cancelled", 422)


class RefundBlockedError(AppError):
    def __init__(self, order_id: int) -> None:
        super().__init__(
            4004,
            f"Order {order_id}: all deposited funds are reserved for locked chunks",
            422,
        )


class InvalidOrderAmountError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(4005, f"Invalid order amount: {detail}", 422)


class ActivationInFlightError(AppError):
    def __init__(self, order_id: int) -> None:
        super().__init__(4006, f"Activation of order {order_id} is already in progress", 409)
