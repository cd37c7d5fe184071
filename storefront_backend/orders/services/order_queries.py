"""
ORDER READS

Owner / admin read paths plus the admin dashboard aggregation.
"""

from __future__ import annotations

import logging
import math

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count, Sum
from django.db.models.functions import TruncMonth

from common.actor import Actor
from common.boundary import action_boundary
from common.exceptions import Forbidden, InvalidOrderTransition, NotAuthenticated, OrderNotFound
from common.money import ZERO, money_str
from common.results import ActionResult, ok
from orders.filters import OrderFilter
from orders.models import Order
from orders.serializers import OrderListSerializer, OrderSerializer
from products.models import Product

logger = logging.getLogger(__name__)

PAGE_SIZE = 6
LATEST_ORDERS = 6


def _page(qs, *, page: int, limit: int) -> dict:
    page = max(int(page or 1), 1)
    limit = max(int(limit or PAGE_SIZE), 1)

    total = qs.count()
    offset = (page - 1) * limit
    rows = list(qs[offset:offset + limit])

    return {
        "data": OrderListSerializer(rows, many=True).data,
        "totalPages": math.ceil(total / limit) if total else 0,
        "page": page,
    }


def get_order_by_id(order_id, actor: Actor) -> dict:
    """
    Full order (items + buyer name/email).

    Only the owner or an admin may read it.
    """
    if not actor.is_authenticated:
        raise NotAuthenticated()

    order = (
        Order.objects.select_related("user")
        .prefetch_related("items")
        .filter(pk=order_id)
        .first()
    )
    if order is None:
        raise OrderNotFound()

    if not actor.is_admin and str(order.user_id) != str(actor.user_id):
        raise Forbidden()

    return OrderSerializer(order).data


def get_my_orders(actor: Actor, *, page: int = 1, limit: int = PAGE_SIZE) -> dict:
    if not actor.is_authenticated:
        raise NotAuthenticated()

    qs = Order.objects.select_related("user").filter(user_id=actor.user_id).order_by("-created_at")
    return _page(qs, page=page, limit=limit)


def get_all_orders(*, page: int = 1, limit: int = PAGE_SIZE, query: str | None = None) -> dict:
    qs = Order.objects.select_related("user").order_by("-created_at")
    if query and query != "all":
        qs = OrderFilter({"query": query}, queryset=qs).qs
    return _page(qs, page=page, limit=limit)


@action_boundary
def delete_order(order_id) -> ActionResult:
    """
    Admin delete.

    Paid orders that are still in flight (paid, not delivered) are kept:
    their stock has been decremented and the shipment is pending.
    """
    with transaction.atomic():
        order = Order.objects.select_for_update().filter(pk=order_id).first()
        if order is None:
            raise OrderNotFound()

        if order.is_paid and not order.is_delivered:
            raise InvalidOrderTransition("Paid orders cannot be deleted before delivery")

        order.delete()

    logger.info("Order deleted", extra={"order_id": str(order_id)})
    return ok("Order deleted successfully")


def get_order_summary() -> dict:
    User = get_user_model()

    totals = Order.objects.aggregate(total=Sum("total_price"))
    monthly = (
        Order.objects.annotate(month=TruncMonth("created_at"))
        .values("month")
        .annotate(total=Sum("total_price"), count=Count("id"))
        .order_by("month")
    )
    latest = Order.objects.select_related("user").order_by("-created_at")[:LATEST_ORDERS]

    return {
        "ordersCount": Order.objects.count(),
        "productsCount": Product.objects.count(),
        "usersCount": User.objects.count(),
        "totalSales": money_str(totals.get("total") or ZERO),
        "salesData": [
            {
                "month": row["month"].strftime("%m/%y") if row["month"] else "",
                "totalSales": money_str(row["total"] or ZERO),
                "orders": row["count"],
            }
            for row in monthly
        ],
        "latestSales": OrderListSerializer(latest, many=True).data,
    }


def ensure_order_access(order_id, actor: Actor) -> Order:
    """Owner-or-admin gate for order-scoped actions."""
    if not actor.is_authenticated:
        raise NotAuthenticated()

    order = Order.objects.filter(pk=order_id).first()
    if order is None:
        raise OrderNotFound()

    if not actor.is_admin and str(order.user_id) != str(actor.user_id):
        raise Forbidden()
    return order
