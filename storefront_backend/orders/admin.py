from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = ("product", "name", "slug", "image", "price", "quantity")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "user",
        "payment_method",
        "total_price",
        "is_paid",
        "is_delivered",
        "created_at",
    )
    list_filter = ("is_paid", "is_delivered", "payment_method")
    search_fields = ("id", "user__email", "user__name")
    inlines = [OrderItemInline]
    readonly_fields = (
        "user",
        "shipping_address",
        "payment_method",
        "items_price",
        "shipping_price",
        "tax_price",
        "total_price",
        "payment_result",
        "paid_at",
        "delivered_at",
        "created_at",
    )
