from .auth import LoginView, LogoutView, RegisterView
from .me import MeView, PaymentMethodView, ShippingAddressView

__all__ = [
    "RegisterView",
    "LoginView",
    "LogoutView",
    "MeView",
    "ShippingAddressView",
    "PaymentMethodView",
]
