# ecobazaar/services/admin_service.py
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

from ecobazaar.data.store import RecordStore
from ecobazaar.domain.roles import Capability, require_capability, require_user
from ecobazaar.domain.schemas import PlatformStats, SessionContext
from ecobazaar.repos.order_repo import OrderRepo
from ecobazaar.repos.product_repo import ProductRepo
from ecobazaar.repos.profile_repo import ProfileRepo
from ecobazaar.utils.logging import get_logger

logger = get_logger(__name__)


class AdminService:
    def __init__(self, store: RecordStore):
        self.profiles = ProfileRepo(store)
        self.products = ProductRepo(store)
        self.orders = OrderRepo(store)

    def platform_stats(self, session: SessionContext) -> PlatformStats:
        """Platform totals; the three reads are independent and run in parallel."""
        require_user(session)
        require_capability(session.profile, Capability.ADMINISTER)

        with ThreadPoolExecutor(max_workers=3) as pool:
            profiles_f = pool.submit(self.profiles.list_profiles)
            products_f = pool.submit(self.products.list_catalog)
            orders_f = pool.submit(self.orders.list_orders)
            profiles, products, orders = profiles_f.result(), products_f.result(), orders_f.result()

        logger.info(
            f"Admin stats: {len(profiles)} users, {len(products)} products, {len(orders)} orders"
        )
        return PlatformStats(
            total_users=len(profiles),
            total_products=len(products),
            total_orders=len(orders),
            total_carbon=float(sum(p.carbon_footprint for p in products)),
            total_revenue=sum((o.total_price for o in orders), Decimal("0.00")),
            category_counts=dict(Counter(p.category or "" for p in products)),
        )
