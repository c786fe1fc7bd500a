from typing import Dict, List

from models.order import Order, OrderItem


def compute_stats(orders: List[dict]) -> dict:
    """Dashboard figures over serialized orders, newest first."""
    revenue = sum(o["order_total"] for o in orders if o["payment_status"] == "completed")
    buyers = {o["user_id"] for o in orders}

    sales: Dict[str, dict] = {}
    for order in orders:
        for item in order["items"]:
            entry = sales.setdefault(
                item["product_id"],
                {"product_id": item["product_id"], "product_name": item["product_name"], "total_sold": 0, "revenue": 0.0},
            )
            entry["total_sold"] += item["quantity"]
            entry["revenue"] += item["total"]
    top_products = sorted(sales.values(), key=lambda e: e["total_sold"], reverse=True)[:5]

    return {
        "total_orders": len(orders),
        "total_revenue": revenue,
        "active_users": len(buyers),
        "recent_sales": orders[:10],
        "top_products": top_products,
    }


class AdminDashboard:
    """Keeps order statistics current from a live orders query."""

    def __init__(self, hub):
        self._query = hub.live_query(
            Order,
            order_by=(Order.created_at.desc(), Order.id.desc()),
            watch=(Order, OrderItem),
        )
        self._unsubscribe = None
        self.orders: List[dict] = []
        self.stats = compute_stats([])

    def _on_orders(self, orders: List[dict]) -> None:
        self.orders = orders
        self.stats = compute_stats(orders)

    def refresh(self) -> dict:
        """Recompute from the database, including writes made by other processes."""
        self._on_orders(self._query.fetch())
        return self.stats

    def start(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self._query.subscribe(self._on_orders)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
