from django.contrib import admin

from .models import Cart


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "user",
        "session_cart_id",
        "items_price",
        "total_price",
        "updated_at",
    )
    search_fields = ("session_cart_id", "user__email")
    readonly_fields = (
        "items",
        "items_price",
        "shipping_price",
        "tax_price",
        "total_price",
        "created_at",
        "updated_at",
    )
