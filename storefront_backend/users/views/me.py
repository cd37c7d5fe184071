# users/views/me.py

from drf_spectacular.utils import extend_schema
from rest_framework import serializers, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.actor import actor_from_request
from common.http import result_response
from users.serializers import PaymentMethodSerializer, ShippingAddressSerializer, UserSerializer
from users.services import (
    SessionTrigger,
    issue_tokens,
    update_user_address,
    update_user_payment_method,
)

# ---------------------------
# SERIALIZER
# ---------------------------


class UpdateNameSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=3, max_length=150)


# ---------------------------
# VIEWS
# ---------------------------


class MeView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = UserSerializer

    @extend_schema(
        responses={200: UserSerializer},
        description="Current user profile",
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data)

    @extend_schema(
        request=UpdateNameSerializer,
        responses={200: dict},
        description="Update display name and re-issue tokens",
    )
    def patch(self, request):
        serializer = UpdateNameSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = request.user
        user.name = serializer.validated_data["name"]
        user.save(update_fields=["name", "updated_at"])

        tokens, _ = issue_tokens(user, SessionTrigger.UPDATE, updated_name=user.name)
        return Response(
            {
                "success": True,
                "message": "User updated successfully",
                **tokens,
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_200_OK,
        )


class ShippingAddressView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=ShippingAddressSerializer, responses={200: dict})
    def put(self, request):
        return result_response(update_user_address(actor_from_request(request), request.data))


class PaymentMethodView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=PaymentMethodSerializer, responses={200: dict})
    def put(self, request):
        return result_response(update_user_payment_method(actor_from_request(request), request.data))
