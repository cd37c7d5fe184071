# users/serializers.py

from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password

from users.models import PAYMENT_METHODS

User = get_user_model()


# ---------------- REGISTER ----------------
class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={"input_type": "password"},
    )
    confirm_password = serializers.CharField(write_only=True, style={"input_type": "password"})

    class Meta:
        model = User
        fields = [
            "email",
            "name",
            "password",
            "confirm_password",
        ]

    def validate(self, attrs):
        if attrs.get("password") != attrs.get("confirm_password"):
            raise serializers.ValidationError({"confirm_password": "Passwords don't match"})
        return attrs

    def create(self, validated_data):
        validated_data.pop("confirm_password", None)
        return User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password"],
            name=validated_data.get("name") or "",
        )


# ---------------- LOGIN (INPUT ONLY) ----------------
class LoginSerializer(serializers.Serializer):
    """
    Input validation only.
    Authentication is handled in the view.
    """
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        min_length=6,
        style={"input_type": "password"},
    )


# ---------------- CHECKOUT PROFILE ----------------
class ShippingAddressSerializer(serializers.Serializer):
    fullName = serializers.CharField(min_length=3, max_length=255)
    streetAddress = serializers.CharField(min_length=3, max_length=255)
    city = serializers.CharField(min_length=3, max_length=120)
    postalCode = serializers.CharField(min_length=3, max_length=32)
    country = serializers.CharField(min_length=3, max_length=120)
    lat = serializers.FloatField(required=False, allow_null=True)
    lng = serializers.FloatField(required=False, allow_null=True)


class PaymentMethodSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=PAYMENT_METHODS)


# ---------------- USER OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    """
    Safe user representation for frontend consumption.
    """
    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "name",
            "role",
            "address",
            "payment_method",
        ]
        read_only_fields = fields
