# ecobazaar/services/order_service.py
import uuid
from decimal import Decimal
from typing import List

from ecobazaar.data.store import RecordStore
from ecobazaar.domain.checkout import CheckoutPlan, CheckoutState, CheckoutStep, PlanLine
from ecobazaar.domain.errors import (
    CheckoutInProgressError,
    InsufficientStockError,
    PartialOrderError,
    RecordNotFoundError,
    RoleError,
    StoreError,
    ValidationError,
)
from ecobazaar.domain.roles import require_user
from ecobazaar.domain.schemas import CheckoutResult, Order, OrderItem, SessionContext
from ecobazaar.repos.cart_repo import CartRepo
from ecobazaar.repos.order_repo import OrderRepo
from ecobazaar.repos.product_repo import ProductRepo
from ecobazaar.repos.profile_repo import ProfileRepo
from ecobazaar.services import carbon
from ecobazaar.services.cart_service import CartService
from ecobazaar.services.notification_service import NotificationService
from ecobazaar.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_STATUS_COMPLETED = "completed"

# compare-and-set attempts per counter (stock line, points) before giving up
CAS_ATTEMPTS = 3


class OrderService:
    """
    Orders: checkout and order history.

    Checkout turns the cart into an order in fixed steps:
    create order -> write order items -> credit points -> adjust stock -> clear cart.
    The store has no transaction across tables, so every applied step is
    recorded in the checkout ledger under the checkout key. Calling
    place_order again with the same key (or the resume job) continues from
    the first missing step and never writes an order or a credit twice.
    """

    def __init__(self, store: RecordStore, ledger, notifier=None):
        self.orders = OrderRepo(store)
        self.carts = CartRepo(store)
        self.products = ProductRepo(store)
        self.profiles = ProfileRepo(store)
        self.cart_service = CartService(store)
        self.ledger = ledger
        self.notifier = notifier or NotificationService()

    # =====================================================
    # QUERY
    # =====================================================
    def list_orders(self, session: SessionContext) -> List[Order]:
        user_id = require_user(session)
        return self.orders.list_orders(user_id)

    def get_order_items(self, session: SessionContext, order_id: str) -> List[OrderItem]:
        user_id = require_user(session)

        order = self.orders.get_order(order_id)
        if order is None:
            raise RecordNotFoundError(f"Order {order_id} does not exist")
        if order.user_id != user_id:
            raise RoleError("No access to this order")

        return self.orders.get_order_items(order_id)

    # =====================================================
    # COMMANDS
    # =====================================================
    def place_order(self, session: SessionContext, checkout_key: str | None = None) -> CheckoutResult:
        """
        Checkout for the session's user.

        Raises AuthenticationRequiredError before any write when there is no
        identity, ValidationError for an empty cart, StoreError when the order
        row could not be written (nothing applied) and PartialOrderError when
        a later step failed (the order exists, retry with the same key).
        """
        user_id = require_user(session)
        key = checkout_key or uuid.uuid4().hex

        token = self.ledger.claim(key)
        if token is None:
            raise CheckoutInProgressError(f"Checkout {key} is already running")

        try:
            plan = self.ledger.load(key)

            if plan is not None and plan.user_id != user_id:
                raise ValidationError("Checkout key belongs to another user")

            if plan is not None and plan.state == CheckoutState.DONE:
                logger.info(f"Checkout {key} already completed, returning order {plan.order_id}")
                return self._result(plan, replayed=True)

            if plan is not None:
                plan = self._reconcile(plan)

            if plan is None:
                plan = self._compute(session, user_id, key)
            else:
                logger.info(f"Resuming checkout {key} after {plan.completed_steps}")

            self._execute(plan)
        finally:
            self._release(key, token)

        self._notify(plan)
        return self._result(plan)

    def resume(self, key: str) -> CheckoutResult | None:
        """Finish a pending checkout from its ledger entry alone (used by the resume job)."""
        token = self.ledger.claim(key)
        if token is None:
            logger.info(f"Checkout {key} is held by another worker, skipping")
            return None

        try:
            plan = self.ledger.load(key)
            if plan is None:
                self.ledger.discard(key)
                return None

            if plan.state == CheckoutState.DONE:
                self.ledger.save(plan)
                return None

            plan = self._reconcile(plan)
            if plan is None:
                return None

            logger.info(f"Resuming checkout {key} after {plan.completed_steps}")
            self._execute(plan)
        finally:
            self._release(key, token)

        self._notify(plan)
        return self._result(plan)

    # =====================================================
    # steps
    # =====================================================
    def _compute(self, session: SessionContext, user_id: str, key: str) -> CheckoutPlan:
        items = self.carts.get_cart_items(user_id)
        if not items:
            raise ValidationError("Cart is empty")

        #one list for all three totals, so the shown and the stored values agree
        totals = carbon.summarize(items)
        balance = self._points_snapshot(session, user_id)

        plan = CheckoutPlan(
            key=key,
            user_id=user_id,
            order_id=str(uuid.uuid4()),
            total_price=totals.total_price,
            total_carbon=totals.total_carbon,
            eco_points=totals.eco_points,
            points_before=balance,
            lines=[
                PlanLine(
                    cart_item_id=item.id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    price=item.product.price if item.product else Decimal("0"),
                    carbon_footprint=item.product.carbon_footprint if item.product else 0.0,
                    stock=item.product.stock if item.product else None,
                )
                for item in items
            ],
        )
        #saved right before the order write
        plan.state = CheckoutState.SUBMITTING
        self.ledger.save(plan)

        logger.info(
            f"Checkout {key} for {user_id}: {len(plan.lines)} line(s), total {plan.total_price}, "
            f"carbon {plan.total_carbon:.2f} kg, +{plan.eco_points} points"
        )
        return plan

    def _points_snapshot(self, session: SessionContext, user_id: str) -> int:
        profile = session.profile
        if profile is None or profile.id != user_id:
            profile = self.profiles.get_profile(user_id)
        return profile.carbon_points if profile else 0

    def _reconcile(self, plan: CheckoutPlan) -> CheckoutPlan | None:
        """
        A stored plan whose order step is not marked may still have reached
        the store before the worker died. Keep going if the order exists,
        otherwise drop the plan so the next attempt reads the cart again.
        """
        if plan.is_done(CheckoutStep.CREATE_ORDER.value):
            return plan

        if self.orders.get_order(plan.order_id) is None:
            logger.info(f"Checkout {plan.key} never wrote its order, discarding plan")
            self.ledger.discard(plan.key)
            return None

        plan.mark(CheckoutStep.CREATE_ORDER.value)
        self.ledger.save(plan)
        return plan

    def _execute(self, plan: CheckoutPlan) -> None:
        steps = [
            (CheckoutStep.CREATE_ORDER, self._create_order),
            (CheckoutStep.WRITE_ITEMS, self._write_items),
            (CheckoutStep.CREDIT_PROFILE, self._credit_profile),
            (CheckoutStep.ADJUST_STOCK, self._adjust_stock),
            (CheckoutStep.CLEAR_CART, self._clear_cart),
        ]

        for step, action in steps:
            if plan.is_done(step.value):
                continue
            try:
                action(plan)
                plan.mark(step.value)
                self.ledger.save(plan)
            except StoreError as e:
                self._fail(plan, step, e)

        plan.state = CheckoutState.DONE
        try:
            self.ledger.save(plan)
        except StoreError as e:
            #everything is applied; the resume job will close the entry
            logger.warning(f"Checkout {plan.key} done but ledger not updated: {e}")

        logger.info(f"Checkout {plan.key} completed, order {plan.order_id}")

    def _fail(self, plan: CheckoutPlan, step: CheckoutStep, error: StoreError) -> None:
        plan.fail(step.value)

        if not plan.is_done(CheckoutStep.CREATE_ORDER.value):
            logger.error(f"Checkout {plan.key}: order could not be created: {error}")
            try:
                self.ledger.discard(plan.key)
            except StoreError as e:
                logger.warning(f"Could not discard checkout {plan.key}: {e}")
            raise error

        logger.error(
            f"Checkout {plan.key}: order {plan.order_id} partially applied, "
            f"step {step.value} failed: {error}"
        )
        try:
            self.ledger.save(plan)
        except StoreError as e:
            logger.warning(f"Could not record failure of checkout {plan.key}: {e}")

        raise PartialOrderError(
            order_id=plan.order_id,
            checkout_key=plan.key,
            completed_steps=plan.completed_steps,
            failed_step=step.value,
            cause=error,
        ) from error

    def _create_order(self, plan: CheckoutPlan) -> None:
        self.orders.create_order(
            {
                "id": plan.order_id,
                "user_id": plan.user_id,
                "total_price": plan.total_price,
                "total_carbon": plan.total_carbon,
                "carbon_points_earned": plan.eco_points,
                "status": ORDER_STATUS_COMPLETED,
            }
        )
        logger.info(f"Order {plan.order_id} created for {plan.user_id}")

    def _write_items(self, plan: CheckoutPlan) -> None:
        #a batch that landed before a crash is not written twice
        if self.orders.get_order_items(plan.order_id):
            logger.info(f"Order {plan.order_id} already has its items")
            return

        self.orders.add_order_items(
            [
                {
                    "order_id": plan.order_id,
                    "product_id": line.product_id,
                    "quantity": line.quantity,
                    "price": line.price,
                    "carbon_footprint": line.carbon_footprint,
                }
                for line in plan.lines
            ]
        )

    def _credit_profile(self, plan: CheckoutPlan) -> None:
        def read():
            profile = self.profiles.get_profile(plan.user_id)
            return profile.carbon_points if profile else None

        balance = self._add_by_cas(
            plan,
            CheckoutStep.CREDIT_PROFILE.value,
            plan.points_before,
            plan.eco_points,
            read=read,
            write=lambda expected, target: self.profiles.compare_and_set_points(plan.user_id, expected, target),
        )
        if balance is None:
            raise RecordNotFoundError(f"Profile {plan.user_id} does not exist")
        logger.info(f"Profile {plan.user_id} credited +{plan.eco_points}, balance {balance}")

    def _adjust_stock(self, plan: CheckoutPlan) -> None:
        for line in plan.lines:
            if line.stock is None:
                continue
            marker = CheckoutPlan.stock_marker(line)
            if plan.is_done(marker):
                continue
            self._decrement_stock(plan, line)
            plan.mark(marker)
            self.ledger.save(plan)

    def _decrement_stock(self, plan: CheckoutPlan, line: PlanLine) -> None:
        def read():
            product = self.products.get_product(line.product_id)
            return product.stock if product else None

        stock = self._add_by_cas(
            plan,
            CheckoutPlan.stock_marker(line),
            line.stock,
            -line.quantity,
            read=read,
            write=lambda expected, target: self.products.compare_and_set_stock(line.product_id, expected, target),
            shortfall=lambda current: InsufficientStockError(line.product_id, current, line.quantity),
        )
        if stock is None:
            logger.warning(f"Product {line.product_id} no longer exists, stock not adjusted")

    def _add_by_cas(self, plan: CheckoutPlan, marker: str, expected: int, delta: int, read, write, shortfall=None):
        """
        Add ``delta`` to a stored counter with compare-and-set writes.

        The expected and target values go into the ledger before every write.
        A retry that finds the counter at a recorded target knows its own write
        landed and does not apply it again; otherwise it starts from the stored
        value. Returns the value written, or None when the row is gone.
        """
        intent = plan.intents.get(marker)
        if intent is not None:
            current = read()
            if current is None:
                return None
            if current == intent.target:
                logger.info(f"Checkout {plan.key}: {marker} already applied ({intent.expected} -> {intent.target})")
                return current
            expected = current

        for _ in range(CAS_ATTEMPTS):
            target = expected + delta
            if target >= 0:
                plan.intend(marker, expected, target)
                self.ledger.save(plan)
                if write(expected, target):
                    logger.info(f"Checkout {plan.key}: {marker} {expected} -> {target}")
                    return target

            #the planned value may be stale, judge against the stored one
            current = read()
            if current is None:
                return None
            if target < 0 and current == expected:
                raise shortfall(current) if shortfall else ValidationError(f"{marker} would go below zero")

            if current != expected:
                logger.warning(f"Checkout {plan.key}: {marker} changed concurrently ({expected} -> {current}), retrying")
            expected = current

        raise StoreError(f"Checkout {plan.key}: {marker} kept changing, gave up after {CAS_ATTEMPTS} attempts")

    def _clear_cart(self, plan: CheckoutPlan) -> None:
        removed = self.carts.clear_cart(plan.user_id)
        logger.info(f"Cleared {removed} cart item(s) of {plan.user_id}")

    # =====================================================
    # helpers
    # =====================================================
    def _release(self, key: str, token: str) -> None:
        try:
            self.ledger.release(key, token)
        except StoreError as e:
            #the claim expires on its own
            logger.warning(f"Could not release checkout {key}: {e}")

    def _notify(self, plan: CheckoutPlan) -> None:
        try:
            self.notifier.send_order_notification(plan.user_id, plan.order_id, plan.eco_points)
        except Exception as e:
            logger.warning(f"Order notification for {plan.order_id} not queued: {e}")

    def _result(self, plan: CheckoutPlan, replayed: bool = False) -> CheckoutResult:
        #refresh: the store is the source of truth for order, cart and stock
        order = self.orders.get_order(plan.order_id)
        if order is None:
            raise RecordNotFoundError(f"Order {plan.order_id} does not exist")

        return CheckoutResult(
            checkout_key=plan.key,
            order=order,
            cart=self.cart_service.get_cart(SessionContext(user_id=plan.user_id)),
            catalog=self.products.list_catalog(),
            replayed=replayed,
        )
