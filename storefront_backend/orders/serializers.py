# orders/serializers.py

from rest_framework import serializers

from orders.models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    productId = serializers.UUIDField(source="product_id", read_only=True)

    class Meta:
        model = OrderItem
        fields = ["productId", "name", "slug", "image", "price", "quantity"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """
    Full order read model (owner or admin).
    """

    items = OrderItemSerializer(many=True, read_only=True)
    status = serializers.CharField(read_only=True)
    user = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "user",
            "status",
            "shipping_address",
            "payment_method",
            "items_price",
            "shipping_price",
            "tax_price",
            "total_price",
            "is_paid",
            "paid_at",
            "payment_result",
            "is_delivered",
            "delivered_at",
            "created_at",
            "items",
        ]
        read_only_fields = fields

    def get_user(self, obj):
        return {"id": str(obj.user_id), "name": obj.user.name, "email": obj.user.email}


class OrderListSerializer(serializers.ModelSerializer):
    user_name = serializers.CharField(source="user.name", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "user_name",
            "total_price",
            "is_paid",
            "paid_at",
            "is_delivered",
            "delivered_at",
            "created_at",
        ]
        read_only_fields = fields


class ApproveOrderInputSerializer(serializers.Serializer):
    orderID = serializers.CharField(max_length=255)
