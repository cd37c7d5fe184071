# payments/urls.py

from django.urls import path

from .views import (
    ApproveProviderOrderView,
    CreateProviderOrderView,
    PayOrderCODView,
    StripeWebhookView,
)

app_name = "payments"

urlpatterns = [
    path(
        "orders/<uuid:order_id>/payments/create/",
        CreateProviderOrderView.as_view(),
        name="provider-order-create",
    ),
    path(
        "orders/<uuid:order_id>/payments/approve/",
        ApproveProviderOrderView.as_view(),
        name="provider-order-approve",
    ),
    # ---------------- ADMIN ----------------
    path("orders/<uuid:order_id>/pay-cod/", PayOrderCODView.as_view(), name="order-pay-cod"),
    # ---------------- PROVIDER CALLBACKS ----------------
    path("payments/stripe/webhook/", StripeWebhookView.as_view(), name="stripe-webhook"),
]
