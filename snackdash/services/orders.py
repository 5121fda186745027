"""Cart-to-order pipeline and the order status state machine."""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple
from urllib.parse import quote

from snackdash.core.enums import OrderStatus, DeliveryMethod
from snackdash.core.exceptions import Conflict, InvalidTransition, NotFound, ValidationError
from snackdash.core.gateway import PersistenceGateway
from snackdash.core.logging import get_logger
from snackdash.models import Order, Tenant
from snackdash.services.cart import Cart, ProductSnapshot
from snackdash.services.catalog import MAX_AMOUNT


logger = get_logger(__name__)

TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset(s for s, targets in TRANSITIONS.items() if not targets)

# Field each delivery method cannot do without
REQUIRED_DETAIL = {
    DeliveryMethod.DINE_IN: ("table_number", "Table number is required for dine-in orders"),
    DeliveryMethod.PICKUP: ("pickup_time", "Pickup time is required for pickup orders"),
    DeliveryMethod.DELIVERY: ("address", "Address is required for delivery orders"),
}

MAX_LINE_QUANTITY = 99
MAX_NOTES_LENGTH = 1000


def allowed_transitions(status: OrderStatus) -> List[OrderStatus]:
    """Statuses reachable from ``status``, in display order."""
    targets = TRANSITIONS[OrderStatus(status)]
    return [s for s in OrderStatus if s in targets]


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return OrderStatus(target) in TRANSITIONS[OrderStatus(current)]


@dataclass
class CustomerMeta:
    name: str
    delivery_method: DeliveryMethod
    contact: Optional[str] = None
    table_number: Optional[str] = None
    pickup_time: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None


def _clean(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def _bounded(value: Optional[str], field: str, limit: Optional[int] = None) -> Optional[str]:
    """Clean ``value`` and reject it when it would not fit its column."""
    value = _clean(value)
    limit = limit or Order.__table__.c[field].type.length
    if value is not None and len(value) > limit:
        raise ValidationError(f"{field} must have at most {limit} characters", field=field)
    return value


def _money(amount) -> str:
    return f"{Decimal(str(amount)):.2f}"


def delivery_detail(order: Order) -> str:
    if order.delivery_method == DeliveryMethod.DINE_IN:
        return f"Dine-in: table {order.table_number}"
    if order.delivery_method == DeliveryMethod.PICKUP:
        return f"Pickup at the counter: {order.pickup_time}"
    return f"Delivery to: {order.address}"


def order_summary(order: Order) -> str:
    """Plain-text summary for the messaging hand-off. Same order, same text."""
    lines = [
        f"*NEW ORDER #{order.id[:8].upper()}*",
        "",
        f"Customer: {order.customer_name}",
    ]
    if order.customer_contact:
        lines.append(f"Contact: {order.customer_contact}")
    lines.append(delivery_detail(order))
    lines.append("")
    lines.append("*ITEMS*")
    for item in order.items:
        lines.append(f"- {item['quantity']}x {item['name']} ({_money(item['line_total'])})")
    if order.notes:
        lines.append("")
        lines.append(f"Notes: {order.notes}")
    lines.append("")
    lines.append(f"*Total: {_money(order.total)}*")
    return "\n".join(lines)


def whatsapp_link(tenant: Tenant, text: str) -> str:
    return f"https://wa.me/{tenant.whatsapp_number}?text={quote(text, safe='')}"


class OrderPipeline:
    """Turns carts into orders and owns every status change."""

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    async def build_checkout_cart(self, tenant: Tenant, lines: Iterable[Tuple[str, int]]) -> Cart:
        """Snapshot the tenant's available products into a fresh cart."""
        lines = list(lines)
        cart = Cart()
        if not lines:
            return cart

        wanted = {product_id for product_id, _ in lines}
        products = await self.gateway.fetch(
            "products",
            {"tenant_id": tenant.id, "id": wanted, "available": True},
        )
        by_id = {p.id: p for p in products}

        for product_id, quantity in lines:
            product = by_id.get(product_id)
            if product is None:
                raise ValidationError("A product in the cart is no longer available", field="items")
            if not isinstance(quantity, int) or quantity < 1 or quantity > MAX_LINE_QUANTITY:
                raise ValidationError(
                    f"Quantity must be between 1 and {MAX_LINE_QUANTITY}", field="items"
                )
            cart.add(ProductSnapshot.of(product))
            cart.set_quantity(product_id, quantity - 1)

        # Repeated lines for one product are merged; the limit holds per product
        if any(item.quantity > MAX_LINE_QUANTITY for item in cart.items):
            raise ValidationError(
                f"Quantity must be between 1 and {MAX_LINE_QUANTITY}", field="items"
            )
        return cart

    def _check(self, cart: Cart, meta: CustomerMeta) -> Dict[str, Any]:
        """Column values for a new order. First failure wins."""
        if cart.is_empty:
            raise ValidationError("Cart is empty", field="items")
        if cart.subtotal() > MAX_AMOUNT:
            raise ValidationError("Order total is too large", field="items")
        name = _bounded(meta.name, "customer_name")
        if not name:
            raise ValidationError("Customer name is required", field="customer_name")
        contact = _bounded(meta.contact, "customer_contact")
        try:
            method = DeliveryMethod(meta.delivery_method)
        except ValueError:
            raise ValidationError("Unknown delivery method", field="delivery_method") from None
        detail_field, message = REQUIRED_DETAIL[method]
        detail = _bounded(getattr(meta, detail_field), detail_field)
        if not detail:
            raise ValidationError(message, field=detail_field)

        values = {
            "customer_name": name,
            "customer_contact": contact,
            "delivery_method": method,
            "notes": _bounded(meta.notes, "notes", MAX_NOTES_LENGTH),
        }
        # Only the field relevant to the chosen method is kept
        for field_name, _ in REQUIRED_DETAIL.values():
            values[field_name] = detail if field_name == detail_field else None
        return values

    async def submit(self, tenant: Tenant, cart: Cart, meta: CustomerMeta) -> Order:
        """Validate, snapshot and persist. Nothing is written on validation failure."""
        if not tenant.is_active:
            raise NotFound("Store not found")
        if not tenant.is_open:
            raise ValidationError("Store is not accepting orders right now")

        values = self._check(cart, meta)

        items = [
            {
                "product_id": item.product.product_id,
                "name": item.product.name,
                "unit_price": _money(item.product.price),
                "quantity": item.quantity,
                "line_total": _money(item.line_total),
            }
            for item in cart.items
        ]
        now = datetime.now(timezone.utc)
        order = await self.gateway.insert("orders", {
            "tenant_id": tenant.id,
            "items": items,
            "total": cart.subtotal(),
            "status": OrderStatus.PENDING,
            "created_at": now,
            "updated_at": now,
            **values,
        })
        logger.info(
            f"Order submitted: {len(items)} lines, total {_money(order.total)}",
            extra={"tenant_id": tenant.id, "order_id": order.id},
        )
        return order

    async def get(self, order_id: str) -> Order:
        order = await self.gateway.get("orders", order_id)
        if order is None:
            raise NotFound("Order not found")
        return order

    async def get_public(self, order_id: str) -> Order:
        """Customer tracking view; orders of inactive stores look missing."""
        order = await self.get(order_id)
        tenant = await self.gateway.get("tenants", order.tenant_id)
        if tenant is None or not tenant.is_active:
            raise NotFound("Order not found")
        return order

    async def get_for_tenant(self, tenant_id: str, order_id: str) -> Order:
        order = await self.get(order_id)
        if order.tenant_id != tenant_id:
            raise NotFound("Order not found")
        return order

    async def advance(self, tenant_id: str, order_id: str, target: OrderStatus) -> Order:
        """Compare-and-swap the status. A lost race is retried once, then Conflict."""
        try:
            target = OrderStatus(target)
        except ValueError:
            raise ValidationError("Unknown order status", field="status") from None

        for attempt in range(2):
            order = await self.get_for_tenant(tenant_id, order_id)
            current = order.status
            if not can_transition(current, target):
                raise InvalidTransition(current, target)

            swapped = await self.gateway.update(
                "orders",
                order_id,
                {"status": target, "updated_at": datetime.now(timezone.utc)},
                expected={"status": current},
            )
            if swapped:
                logger.info(
                    f"Order {current.value} -> {target.value}",
                    extra={"tenant_id": tenant_id, "order_id": order_id},
                )
                return await self.get_for_tenant(tenant_id, order_id)

            logger.warning(
                f"Lost status race on attempt {attempt + 1}",
                extra={"tenant_id": tenant_id, "order_id": order_id},
            )

        raise Conflict("Order was updated by someone else, please reload")

    async def list_for_tenant(
        self,
        tenant_id: str,
        status: Optional[OrderStatus] = None,
        active_only: bool = False,
        page: int = 1,
        page_size: int = 50,
    ) -> Tuple[List[Order], int]:
        """Newest first. Returns the page and the total matching count."""
        filters = {"tenant_id": tenant_id}
        if status is not None:
            filters["status"] = OrderStatus(status)
        elif active_only:
            filters["status"] = [s for s in OrderStatus if s not in TERMINAL_STATUSES]

        total = await self.gateway.count("orders", filters)
        orders = await self.gateway.fetch(
            "orders",
            filters,
            order_by="created_at",
            descending=True,
            limit=page_size,
            offset=(page - 1) * page_size,
        )
        return orders, total
