# cart/views.py

"""
CART API VIEWS

Anonymous-friendly. The session cart token arrives in the
X-Session-Cart-Id header (or the sessionCartId cookie); an
authenticated user's cart always takes precedence.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from cart.serializers import CartItemInputSerializer, CartSerializer
from cart.services import add_item_to_cart, get_my_cart, remove_item_from_cart
from common.actor import SESSION_CART_HEADER, actor_from_request
from common.http import result_response

SESSION_HEADER_PARAM = OpenApiParameter(
    name=SESSION_CART_HEADER,
    type=str,
    location=OpenApiParameter.HEADER,
    required=False,
    description="Anonymous cart token",
)


class CartView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(
        parameters=[SESSION_HEADER_PARAM],
        responses={200: CartSerializer},
        description="Current cart. An absent cart is an empty state, not an error.",
    )
    def get(self, request):
        cart = get_my_cart(actor_from_request(request))
        if cart is None:
            return Response(
                {"success": True, "message": "No cart", "data": None},
                status=status.HTTP_200_OK,
            )
        return Response(
            {"success": True, "message": "Cart found", "data": CartSerializer(cart).data},
            status=status.HTTP_200_OK,
        )


class CartItemsView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "cart"

    @extend_schema(
        parameters=[SESSION_HEADER_PARAM],
        request=CartItemInputSerializer,
        responses={200: dict},
        description="Add one unit of a product to the cart",
    )
    def post(self, request):
        result = add_item_to_cart(actor_from_request(request), request.data)
        return result_response(result)


class CartItemDetailView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "cart"

    @extend_schema(
        parameters=[SESSION_HEADER_PARAM],
        responses={200: dict},
        description="Remove one unit of a product from the cart",
    )
    def delete(self, request, product_id):
        result = remove_item_from_cart(actor_from_request(request), product_id)
        return result_response(result)
