# products/admin.py

from django.contrib import admin

from products.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "price", "stock", "is_featured", "created_at")
    list_filter = ("is_featured", "category", "brand")
    search_fields = ("name", "slug", "brand")
    prepopulated_fields = {"slug": ("name",)}
    ordering = ("-created_at",)
