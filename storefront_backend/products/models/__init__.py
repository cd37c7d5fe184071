"""
PATH: products/models/__init__.py

Products models export surface.
"""

from .product import Product

__all__ = [
    "Product",
]
