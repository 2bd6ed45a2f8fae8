# ecobazaar/domain/checkout.py
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, Field


class CheckoutState(str, Enum):
    IDLE = "idle"
    COMPUTING = "computing"
    SUBMITTING = "submitting"
    ITEMS_WRITTEN = "items_written"
    PROFILE_CREDITED = "profile_credited"
    STOCK_ADJUSTED = "stock_adjusted"
    CART_CLEARED = "cart_cleared"
    DONE = "done"
    FAILED = "failed"


class CheckoutStep(str, Enum):
    CREATE_ORDER = "create_order"
    WRITE_ITEMS = "write_items"
    CREDIT_PROFILE = "credit_profile"
    ADJUST_STOCK = "adjust_stock"
    CLEAR_CART = "clear_cart"


# state reached once a step has completed; the plan is saved as SUBMITTING
# right before the order write and stays there until the items are written
STATE_AFTER = {
    CheckoutStep.WRITE_ITEMS: CheckoutState.ITEMS_WRITTEN,
    CheckoutStep.CREDIT_PROFILE: CheckoutState.PROFILE_CREDITED,
    CheckoutStep.ADJUST_STOCK: CheckoutState.STOCK_ADJUSTED,
    CheckoutStep.CLEAR_CART: CheckoutState.CART_CLEARED,
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PlanLine(BaseModel):
    """One cart line frozen at checkout time."""

    cart_item_id: str
    product_id: str
    quantity: int
    price: Decimal
    carbon_footprint: float
    # None when the cart line had no joined product
    stock: int | None = None


class WriteIntent(BaseModel):
    """Compare-and-set about to be sent: the stored value it expects and the one it writes."""

    expected: int
    target: int


class CheckoutPlan(BaseModel):
    """
    Everything a checkout writes, computed once up front.

    The plan is stored in the checkout ledger under its idempotency key, so a
    retried or resumed checkout replays the same values and skips the steps
    listed in ``completed_steps``.
    """

    key: str
    user_id: str
    order_id: str
    total_price: Decimal
    total_carbon: float
    eco_points: int
    # balance the credit expects to find, the credit adds eco_points to it
    points_before: int
    lines: List[PlanLine]
    state: CheckoutState = CheckoutState.COMPUTING
    completed_steps: List[str] = Field(default_factory=list)
    # keyed like completed_steps, recorded before each counter write
    intents: Dict[str, WriteIntent] = Field(default_factory=dict)
    failed_step: str | None = None
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    def is_done(self, step: str) -> bool:
        return step in self.completed_steps

    def mark(self, step: str) -> None:
        if step not in self.completed_steps:
            self.completed_steps.append(step)
        # order creation and per-line stock markers keep the current state
        next_state = STATE_AFTER.get(step)
        if next_state is not None:
            self.state = next_state
        self.failed_step = None
        self.updated_at = _now()

    def intend(self, marker: str, expected: int, target: int) -> None:
        self.intents[marker] = WriteIntent(expected=expected, target=target)
        self.updated_at = _now()

    def fail(self, step: str) -> None:
        self.state = CheckoutState.FAILED
        self.failed_step = step
        self.updated_at = _now()

    @staticmethod
    def stock_marker(line: PlanLine) -> str:
        return f"{CheckoutStep.ADJUST_STOCK.value}:{line.cart_item_id}"
