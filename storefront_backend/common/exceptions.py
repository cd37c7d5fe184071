# common/exceptions.py

"""
STOREFRONT DOMAIN ERRORS

One hierarchy for the whole checkout pipeline.

- InvalidInput / NotFoundError / BusinessRuleViolation / PaymentError
  are expected outcomes: the action boundary turns them into an ActionResult.
- StorageFault is a real fault: it propagates to the HTTP layer.
"""


class StorefrontError(Exception):
    """Base exception for every storefront service failure."""

    code = "error"
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None, *, code: str | None = None):
        self.message = message or self.default_message
        if code:
            self.code = code
        super().__init__(self.message)


# ---------------------------------------------------------
# VALIDATION
# ---------------------------------------------------------
class InvalidInput(StorefrontError):
    """Raised when input has the wrong shape (before any mutation)."""

    code = "invalid_input"
    default_message = "Invalid input"


# ---------------------------------------------------------
# NOT FOUND
# ---------------------------------------------------------
class NotFoundError(StorefrontError):
    code = "not_found"
    default_message = "Not found"


class CartNotFound(NotFoundError):
    code = "cart_not_found"
    default_message = "Cart not found"


class CartItemNotFound(NotFoundError):
    code = "cart_item_not_found"
    default_message = "Item not found in cart"


class ProductNotFound(NotFoundError):
    code = "product_not_found"
    default_message = "Product not found"


class OrderNotFound(NotFoundError):
    code = "order_not_found"
    default_message = "Order not found"


class UserNotFound(NotFoundError):
    code = "user_not_found"
    default_message = "User not found"


# ---------------------------------------------------------
# BUSINESS RULES
# ---------------------------------------------------------
class BusinessRuleViolation(StorefrontError):
    code = "business_rule_violation"
    default_message = "Request violates a business rule"
    redirect_to: str | None = None


class NotAuthenticated(BusinessRuleViolation):
    code = "not_authenticated"
    default_message = "User is not authenticated"
    redirect_to = "/sign-in"


class Forbidden(BusinessRuleViolation):
    code = "forbidden"
    default_message = "You are not allowed to perform this action"


class OutOfStock(BusinessRuleViolation):
    code = "out_of_stock"
    default_message = "Not enough stock"

    def __init__(self, message: str | None = None, *, product_id=None, requested=None, available=None):
        super().__init__(message)
        self.product_id = product_id
        self.requested = requested
        self.available = available


class EmptyCart(BusinessRuleViolation):
    code = "cart_empty"
    default_message = "Your cart is empty"
    redirect_to = "/cart"


class MissingShippingAddress(BusinessRuleViolation):
    code = "missing_shipping_address"
    default_message = "No shipping address"
    redirect_to = "/shipping-address"


class MissingPaymentMethod(BusinessRuleViolation):
    code = "missing_payment_method"
    default_message = "No payment method"
    redirect_to = "/payment-method"


class AlreadyPaid(BusinessRuleViolation):
    code = "already_paid"
    default_message = "Order is already paid"


class NotYetPaid(BusinessRuleViolation):
    code = "not_yet_paid"
    default_message = "Order is not paid"


class InvalidOrderTransition(BusinessRuleViolation):
    code = "invalid_transition"
    default_message = "Order cannot make this transition"


# ---------------------------------------------------------
# PAYMENTS
# ---------------------------------------------------------
class PaymentError(StorefrontError):
    code = "payment_error"
    default_message = "Payment failed, please try again"


class PaymentVerificationFailed(PaymentError):
    code = "payment_verification_failed"
    default_message = "Payment could not be verified"


class ProviderError(PaymentError):
    """Raised when the payment gateway call itself fails."""

    code = "provider_error"

    def __init__(self, message: str | None = None, *, provider: str = "", status: int | None = None):
        super().__init__(message)
        self.provider = provider
        self.status = status


class RetryableProviderError(ProviderError):
    """Timeout, connection failure, 5xx or throttling. Safe to retry later."""

    code = "provider_unavailable"


class ProviderRejectedError(ProviderError):
    """Definitive rejection by the provider (4xx)."""

    code = "provider_rejected"


# ---------------------------------------------------------
# STORAGE
# ---------------------------------------------------------
class StorageFault(StorefrontError):
    """Transaction/connection failure. Whole operation is safe to retry."""

    code = "storage_fault"
    default_message = "Service temporarily unavailable, please try again"
