from decimal import Decimal

from django.core.management.base import BaseCommand
from django.utils.text import slugify

from products.models import Product


class Command(BaseCommand):
    help = "Seed a small demo catalog (idempotent by slug)"

    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding products..."))

        # -------------------------------
        # PRODUCTS
        # (name, category, brand, price, stock, featured)
        # -------------------------------
        products_data = [
            ("Polo Sporting Stretch Shirt", "Men's Dress Shirts", "Polo", "59.99", 5, True),
            ("Brooks Brothers Long Sleeved Shirt", "Men's Dress Shirts", "Brooks Brothers", "85.90", 10, True),
            ("Tommy Hilfiger Classic-Fit Dress Shirt", "Men's Dress Shirts", "Tommy Hilfiger", "99.95", 0, False),
            ("Calvin Klein Slim Fit Stretch Shirt", "Men's Dress Shirts", "Calvin Klein", "39.95", 10, False),
            ("Polo Ralph Lauren Oxford Shirt", "Men's Dress Shirts", "Polo", "79.99", 18, False),
            ("Polo Classic Pink Hoodie", "Men's Sweatshirts", "Polo", "99.99", 20, False),
        ]

        created_count = 0
        for name, category, brand, price, stock, featured in products_data:
            slug = slugify(name)
            _, created = Product.objects.get_or_create(
                slug=slug,
                defaults={
                    "name": name,
                    "category": category,
                    "brand": brand,
                    "description": f"{name} by {brand}",
                    "images": [f"/images/sample-products/{slug}.jpg"],
                    "price": Decimal(price),
                    "stock": stock,
                    "is_featured": featured,
                },
            )
            created_count += int(created)

        self.stdout.write(
            self.style.SUCCESS(f"Products seeded ({created_count} created).")
        )
