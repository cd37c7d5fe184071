# users/views/auth.py

"""
AUTH VIEWS

- register / login issue a SimpleJWT pair (claims: role, name)
  and hand the anonymous session cart over to the user
- logout discards the session cart
"""

from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from drf_spectacular.utils import extend_schema
from rest_framework import serializers, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from cart.services import discard_session_cart, transfer_session_cart
from common.actor import session_cart_id_from_request
from users.serializers import LoginSerializer, RegisterSerializer, UserSerializer
from users.services import SessionTrigger, issue_tokens

logger = logging.getLogger(__name__)

# ---------------------------
# SERIALIZERS (LOCAL, SIMPLE)
# ---------------------------


class AuthResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField()
    access = serializers.CharField()
    refresh = serializers.CharField()
    user = UserSerializer()


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)


# ---------------------------
# HELPERS
# ---------------------------


def _signed_in_response(request, user, trigger: SessionTrigger, *, message: str, http_status: int):
    tokens, outcome = issue_tokens(user, trigger)

    if outcome.transfer_session_cart:
        transfer_session_cart(user, session_cart_id_from_request(request))

    return Response(
        {
            "success": True,
            "message": message,
            **tokens,
            "user": UserSerializer(user).data,
        },
        status=http_status,
    )


# ---------------------------
# VIEWS
# ---------------------------


class RegisterView(APIView):
    permission_classes = [AllowAny]
    serializer_class = RegisterSerializer
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "auth"

    @extend_schema(
        request=RegisterSerializer,
        responses={201: AuthResponseSerializer},
        description="Register a new shopper account",
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        return _signed_in_response(
            request,
            user,
            SessionTrigger.SIGN_UP,
            message="User registered successfully",
            http_status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    permission_classes = [AllowAny]
    serializer_class = LoginSerializer
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "auth"

    @extend_schema(
        request=LoginSerializer,
        responses={200: AuthResponseSerializer},
        description="Authenticate with email and password",
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = authenticate(
            request=request,
            email=serializer.validated_data["email"],
            password=serializer.validated_data["password"],
        )

        if not user:
            return Response(
                {"success": False, "message": "Invalid email or password"},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        return _signed_in_response(
            request,
            user,
            SessionTrigger.SIGN_IN,
            message="Signed in successfully",
            http_status=status.HTTP_200_OK,
        )


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=LogoutSerializer, responses={200: dict})
    def post(self, request):
        serializer = LogoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        refresh = (serializer.validated_data.get("refresh") or "").strip()
        if refresh:
            try:
                RefreshToken(refresh).blacklist()
            except TokenError:
                logger.info("Logout with an invalid refresh token", extra={"user_id": str(request.user.pk)})

        discard_session_cart(session_cart_id_from_request(request))
        return Response({"success": True, "message": "Signed out"}, status=status.HTTP_200_OK)
