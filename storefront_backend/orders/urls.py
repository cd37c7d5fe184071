# orders/urls.py

from django.urls import path

from .views import (
    DeliverOrderView,
    MyOrdersView,
    OrderDetailView,
    OrderListCreateView,
    OrderSummaryView,
)

app_name = "orders"

urlpatterns = [
    path("", OrderListCreateView.as_view(), name="order-list-create"),
    path("mine/", MyOrdersView.as_view(), name="my-orders"),
    path("summary/", OrderSummaryView.as_view(), name="order-summary"),
    path("<uuid:order_id>/", OrderDetailView.as_view(), name="order-detail"),
    # ---------------- ADMIN ----------------
    path("<uuid:order_id>/deliver/", DeliverOrderView.as_view(), name="order-deliver"),
]
