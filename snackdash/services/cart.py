"""In-memory cart for one customer session. No I/O, never persisted."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional


@dataclass(frozen=True)
class ProductSnapshot:
    """Copy of the product fields the cart needs, taken at add time."""
    product_id: str
    name: str
    price: Decimal
    image: Optional[str] = None

    @classmethod
    def of(cls, product) -> "ProductSnapshot":
        return cls(
            product_id=product.id,
            name=product.name,
            price=Decimal(str(product.price)),
            image=product.image,
        )


@dataclass
class CartItem:
    product: ProductSnapshot
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity


class Cart:
    """Insertion-ordered mapping of product id to CartItem.

    A stored item always has ``quantity >= 1``.
    """

    def __init__(self):
        self._items: Dict[str, CartItem] = {}

    def add(self, product) -> CartItem:
        """Add one unit. ``product`` may be a model instance or a ProductSnapshot."""
        snapshot = product if isinstance(product, ProductSnapshot) else ProductSnapshot.of(product)
        item = self._items.get(snapshot.product_id)
        if item is None:
            item = CartItem(product=snapshot, quantity=1)
            self._items[snapshot.product_id] = item
        else:
            item.quantity += 1
        return item

    def set_quantity(self, product_id: str, delta: int) -> Optional[CartItem]:
        """Add ``delta`` (may be negative). Drops the item once it reaches zero."""
        item = self._items.get(product_id)
        if item is None:
            return None
        quantity = item.quantity + delta
        if quantity <= 0:
            del self._items[product_id]
            return None
        item.quantity = quantity
        return item

    def remove(self, product_id: str) -> None:
        self._items.pop(product_id, None)

    def clear(self) -> None:
        self._items.clear()

    def subtotal(self) -> Decimal:
        return sum((item.line_total for item in self._items.values()), Decimal("0"))

    @property
    def items(self) -> List[CartItem]:
        return list(self._items.values())

    @property
    def count(self) -> int:
        """Total units across all items."""
        return sum(item.quantity for item in self._items.values())

    @property
    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, product_id: str) -> bool:
        return product_id in self._items
