"""Sales statistics for tenant admins and the platform operator."""
from collections import Counter
from decimal import Decimal
from typing import Dict, List, Tuple

from snackdash.core.enums import OrderStatus
from snackdash.core.gateway import PersistenceGateway


def _gross(orders) -> Decimal:
    return sum(
        (Decimal(str(o.total)) for o in orders if o.status != OrderStatus.CANCELLED),
        Decimal("0"),
    )


def best_sellers(orders, limit: int = 3) -> List[Tuple[str, int]]:
    counts: Counter = Counter()
    for order in orders:
        if order.status == OrderStatus.CANCELLED:
            continue
        for item in order.items:
            counts[item["name"]] += int(item["quantity"])
    return counts.most_common(limit)


async def tenant_stats(gateway: PersistenceGateway, tenant_id: str) -> Dict:
    orders = await gateway.fetch("orders", {"tenant_id": tenant_id})
    gross = _gross(orders)
    by_status = Counter(o.status.value for o in orders)
    average = (gross / len(orders)).quantize(Decimal("0.01")) if orders else Decimal("0.00")
    return {
        "gross_sales": gross,
        "order_count": len(orders),
        "average_ticket": average,
        "orders_by_status": {s.value: by_status.get(s.value, 0) for s in OrderStatus},
        "best_sellers": [{"name": n, "quantity": q} for n, q in best_sellers(orders)],
    }


async def platform_stats(gateway: PersistenceGateway) -> Dict:
    tenants = await gateway.fetch("tenants")
    orders = await gateway.fetch("orders")
    return {
        "tenant_count": len(tenants),
        "active_tenant_count": sum(1 for t in tenants if t.is_active),
        "trial_tenant_count": sum(1 for t in tenants if t.trial_active),
        "order_count": len(orders),
        "gross_sales": _gross(orders),
    }
