# ecobazaar/domain/errors.py
from typing import Iterable


class EcoBazaarError(Exception):
    """Base for every error raised by the EcoBazaar services."""


class ValidationError(EcoBazaarError, ValueError):
    """Caller input rejected before anything was written."""


class AuthenticationRequiredError(ValidationError):
    """No authenticated identity in the session context."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class RoleError(EcoBazaarError, PermissionError):
    """The acting profile's role does not allow the operation."""


class StoreError(EcoBazaarError, RuntimeError):
    """A record store call failed (transport, constraint or driver error)."""


class RecordNotFoundError(StoreError):
    pass


class InsufficientStockError(StoreError):
    def __init__(self, product_id: str, stock: int, requested: int):
        super().__init__(
            f"Product {product_id} has {stock} in stock, {requested} requested"
        )
        self.product_id = product_id
        self.stock = stock
        self.requested = requested


class CheckoutInProgressError(EcoBazaarError):
    """Another worker currently holds the checkout key."""


class PartialOrderError(StoreError):
    """
    A store failure after the order row was written but before the cart was
    cleared. The order exists; some of its follow-up writes may be missing.
    """

    def __init__(
        self,
        order_id: str,
        checkout_key: str,
        completed_steps: Iterable[str],
        failed_step: str,
        cause: Exception,
    ):
        super().__init__(
            f"Order {order_id} partially applied: step '{failed_step}' failed ({cause})"
        )
        self.order_id = order_id
        self.checkout_key = checkout_key
        self.completed_steps = list(completed_steps)
        self.failed_step = failed_step
        self.cause = cause
