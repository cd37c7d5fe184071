# cart/serializers.py

from rest_framework import serializers

from cart.models import Cart


class CartItemInputSerializer(serializers.Serializer):
    """
    Shape of one add-to-cart line.

    Price/name/slug/image are re-read from the Product on add;
    the client copy is only shape-checked.
    """

    productId = serializers.UUIDField()
    name = serializers.CharField(max_length=255)
    slug = serializers.CharField(max_length=255)
    image = serializers.CharField(max_length=500, allow_blank=True, required=False, default="")
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    quantity = serializers.IntegerField(min_value=0, required=False, default=1)


class CartItemSerializer(serializers.Serializer):
    productId = serializers.CharField()
    name = serializers.CharField()
    slug = serializers.CharField()
    image = serializers.CharField(allow_blank=True)
    price = serializers.CharField()
    quantity = serializers.IntegerField()


class CartSerializer(serializers.ModelSerializer):
    sessionCartId = serializers.CharField(source="session_cart_id", read_only=True)
    userId = serializers.UUIDField(source="user_id", read_only=True, allow_null=True)
    items = CartItemSerializer(many=True, read_only=True)
    itemsPrice = serializers.DecimalField(source="items_price", max_digits=12, decimal_places=2, read_only=True)
    shippingPrice = serializers.DecimalField(source="shipping_price", max_digits=12, decimal_places=2, read_only=True)
    taxPrice = serializers.DecimalField(source="tax_price", max_digits=12, decimal_places=2, read_only=True)
    totalPrice = serializers.DecimalField(source="total_price", max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Cart
        fields = [
            "id",
            "sessionCartId",
            "userId",
            "items",
            "itemsPrice",
            "shippingPrice",
            "taxPrice",
            "totalPrice",
        ]
