# orders/views.py

"""
ORDER API VIEWS

Shopper:
- POST /orders/            create from cart
- GET  /orders/mine/       paginated history
- GET  /orders/<id>/       owner or admin

Admin:
- GET    /orders/            all orders (?query=&page=&limit=)
- GET    /orders/summary/    dashboard aggregation
- DELETE /orders/<id>/
- POST   /orders/<id>/deliver/
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.actor import actor_from_request
from common.http import result_response
from orders.serializers import OrderSerializer
from orders.services import (
    create_order,
    delete_order,
    deliver_order,
    get_all_orders,
    get_my_orders,
    get_order_by_id,
    get_order_summary,
)
from permissions.roles import IsAdmin

PAGE_PARAMS = [
    OpenApiParameter(name="page", type=int, required=False),
    OpenApiParameter(name="limit", type=int, required=False),
]


def _int_param(request, name: str, default: int) -> int:
    raw = (request.query_params.get(name) or "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


class OrderListCreateView(APIView):
    """
    POST: any authenticated shopper.
    GET:  admin only.
    """

    permission_classes = [IsAuthenticated]

    def get_permissions(self):
        if self.request.method == "GET":
            return [IsAdmin()]
        return super().get_permissions()

    @extend_schema(
        parameters=[*PAGE_PARAMS, OpenApiParameter(name="query", type=str, required=False)],
        responses={200: dict},
        description="Admin: list all orders",
    )
    def get(self, request):
        data = get_all_orders(
            page=_int_param(request, "page", 1),
            limit=_int_param(request, "limit", 6),
            query=request.query_params.get("query"),
        )
        return Response(data, status=status.HTTP_200_OK)

    @extend_schema(
        request=None,
        responses={201: dict},
        description="Create an order from the current cart",
    )
    def post(self, request):
        result = create_order(actor_from_request(request))
        return result_response(result, success_status=status.HTTP_201_CREATED)


class MyOrdersView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(parameters=PAGE_PARAMS, responses={200: dict})
    def get(self, request):
        data = get_my_orders(
            actor_from_request(request),
            page=_int_param(request, "page", 1),
            limit=_int_param(request, "limit", 6),
        )
        return Response(data, status=status.HTTP_200_OK)


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get_permissions(self):
        if self.request.method == "DELETE":
            return [IsAdmin()]
        return super().get_permissions()

    @extend_schema(responses={200: OrderSerializer})
    def get(self, request, order_id):
        data = get_order_by_id(order_id, actor_from_request(request))
        return Response(data, status=status.HTTP_200_OK)

    @extend_schema(responses={200: dict}, description="Admin: delete an order")
    def delete(self, request, order_id):
        return result_response(delete_order(order_id))


class OrderSummaryView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(responses={200: dict})
    def get(self, request):
        return Response(get_order_summary(), status=status.HTTP_200_OK)


class DeliverOrderView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(request=None, responses={200: dict})
    def post(self, request, order_id):
        return result_response(deliver_order(order_id))
