"""Seed data script to populate a demo store."""
import asyncio

from snackdash.core.database import async_session_maker, create_tables
from snackdash.core.exceptions import Conflict
from snackdash.core.gateway import PersistenceGateway
from snackdash.services.catalog import Catalog
from snackdash.services.tenants import TenantDirectory


DEMO_SLUG = "burger-house"
DEMO_PASSWORD = "burger123"

STARTER_MENU = [
    {
        "name": "Artisan Cheeseburger",
        "price": "32.00",
        "category": "Burgers",
        "description": "180g beef patty, melted cheddar, caramelized onion and house mayo on a brioche bun.",
        "image": "https://images.unsplash.com/photo-1568901346375-23c9450c58cd?auto=format&fit=crop&q=80&w=800",
        "extras": [
            {"id": "e1", "name": "Extra Cheese", "price": "4.50"},
            {"id": "e2", "name": "Crispy Bacon", "price": "6.00"},
        ],
    },
    {
        "name": "Double Bacon Monster",
        "price": "45.50",
        "category": "Burgers",
        "description": "Two 180g patties, lots of bacon, double cheese and BBQ sauce.",
        "image": "https://images.unsplash.com/photo-1594212699903-ec8a3eca50f5?auto=format&fit=crop&q=80&w=800",
    },
    {
        "name": "Rustic Rosemary Fries",
        "price": "18.00",
        "category": "Sides",
        "description": "Hand-cut potatoes with coarse salt and fresh rosemary.",
        "image": "https://images.unsplash.com/photo-1573080496219-bb080dd4f877?auto=format&fit=crop&q=80&w=800",
    },
    {
        "name": "Nutella Milkshake",
        "price": "24.50",
        "category": "Drinks",
        "description": "Vanilla ice cream blended with Nutella.",
        "image": "https://images.unsplash.com/photo-1572490122747-3968b75cc699?auto=format&fit=crop&q=80&w=800",
    },
]


async def seed_data():
    """Seed a demo store with the starter menu."""
    async with async_session_maker() as session:
        gateway = PersistenceGateway(session)
        directory = TenantDirectory(gateway)
        catalog = Catalog(gateway)

        try:
            tenant = await directory.create(
                name="Burger House",
                slug=DEMO_SLUG,
                contact="5511999999999",
                admin_password=DEMO_PASSWORD,
            )
        except Conflict:
            print("Data already seeded. Skipping...")
            return

        print(f"Created tenant: {tenant.name} (slug: {tenant.slug})")

        for fields in STARTER_MENU:
            product = await catalog.create(tenant.id, fields)
            print(f"Created product: {product.name} ({product.price})")

        print("\n✅ Seed data created successfully!")
        print("\n📝 Store admin credentials:")
        print(f"   {DEMO_SLUG} / {DEMO_PASSWORD}")


async def main():
    """Main entry point."""
    await create_tables()

    await seed_data()


if __name__ == "__main__":
    asyncio.run(main())
