# ecobazaar/services/cart_service.py
from ecobazaar.data.store import RecordStore
from ecobazaar.domain.errors import RecordNotFoundError
from ecobazaar.domain.roles import require_user
from ecobazaar.domain.schemas import CartView, Recommendation, SessionContext
from ecobazaar.repos.cart_repo import CartRepo
from ecobazaar.repos.product_repo import ProductRepo
from ecobazaar.services import carbon, recommendation_service
from ecobazaar.utils.logging import get_logger

logger = get_logger(__name__)


def clamp_quantity(requested: int) -> int:
    """Callers never write less than one unit; removal is a separate command."""
    return max(1, requested)


class CartService:
    """
    Use cases for the cart
    commands (request_add, add_product, set_quantity, remove_item) change state and return nothing
    query (get_cart) is the only source of truth, call it after every command
    """

    def __init__(self, store: RecordStore):
        self.repo = CartRepo(store)
        self.products = ProductRepo(store)

    #query
    def get_cart(self, session: SessionContext) -> CartView:
        user_id = require_user(session)
        items = self.repo.get_cart_items(user_id)
        return CartView(
            items=items,
            totals=carbon.summarize(items),
            item_count=carbon.item_count(items),
        )

    #commands
    def request_add(self, session: SessionContext, product_id: str) -> Recommendation | None:
        """
        Add-to-cart as the shopper triggers it.

        Returns a recommendation instead of adding when a lower-carbon
        alternative exists; the shopper then picks the alternative or the
        original and the caller goes through add_product.
        """
        require_user(session)

        product = self.products.get_product(product_id)
        if product is None:
            raise RecordNotFoundError(f"Product {product_id} does not exist")

        if recommendation_service.should_intercept(product):
            recommendation = recommendation_service.decide(product, self.products.list_catalog())
            if recommendation is not None:
                logger.info(
                    f"Add of {product_id} intercepted, alternatives: "
                    f"{[p.id for p in recommendation.alternatives]}"
                )
                return recommendation

        self.add_product(session, product.id)
        return None

    def add_product(self, session: SessionContext, product_id: str) -> None:
        user_id = require_user(session)

        #find-then-write, not atomic; a racing duplicate is caught by the unique (user, product) key
        existing = self.repo.get_cart_item(user_id, product_id)

        if existing:
            logger.info(
                f"Product {product_id} already in cart of {user_id}, quantity "
                f"{existing.quantity} -> {existing.quantity + 1}"
            )
            self.repo.update_quantity(user_id, existing.id, existing.quantity + 1)
        else:
            logger.info(f"Adding product {product_id} to cart of {user_id}")
            self.repo.add_cart_item(user_id, product_id, 1)

    def set_quantity(self, session: SessionContext, item_id: str, quantity: int) -> None:
        """Writes ``quantity`` as given; clamping is the caller's job (clamp_quantity)."""
        user_id = require_user(session)

        logger.info(f"Setting quantity of cart item {item_id} to {quantity}")
        if self.repo.update_quantity(user_id, item_id, quantity) == 0:
            raise RecordNotFoundError(f"Cart item {item_id} not found")

    def remove_item(self, session: SessionContext, item_id: str) -> None:
        user_id = require_user(session)

        logger.info(f"Removing cart item {item_id} of {user_id}")
        if self.repo.delete_cart_item(user_id, item_id) == 0:
            raise RecordNotFoundError(f"Cart item {item_id} not found")
