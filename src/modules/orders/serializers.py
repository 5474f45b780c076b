"""Request validation and response shapes for the orders API."""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderItem, OrderStatusHistory, ShippingAddress


def _optional_text(max_length: int | None = None, default: str = ""):
    return serializers.CharField(
        max_length=max_length, required=False, default=default, allow_blank=True
    )


class CheckoutSerializer(serializers.Serializer):
    address_line = _optional_text(255)
    district = _optional_text(100)
    city = _optional_text(100, default="Lima")
    reference = _optional_text(255)
    notes = _optional_text()


class StatusUpdateSerializer(serializers.Serializer):
    # Raw token; OrderService resolves aliases and casing.
    status = serializers.CharField()
    notes = _optional_text()


class AssignCourierSerializer(serializers.Serializer):
    courier_id = serializers.UUIDField()


class OrderItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)
    product_sku = serializers.CharField(source="product.sku", read_only=True)

    class Meta:
        model = OrderItem
        fields = read_only_fields = (
            "id",
            "product_id",
            "product_name",
            "product_sku",
            "quantity",
            "unit_price",
            "subtotal",
        )


class ShippingAddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = ShippingAddress
        fields = read_only_fields = ("address_line", "district", "city", "reference")


class StatusHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderStatusHistory
        fields = read_only_fields = (
            "id",
            "old_status",
            "new_status",
            "changed_by_id",
            "notes",
            "created_at",
        )


class OrderListSerializer(serializers.ModelSerializer):
    """Summary row used by every paginated listing."""

    display_status = serializers.CharField(read_only=True)

    class Meta:
        model = Order
        fields = read_only_fields = (
            "id",
            "order_number",
            "user_id",
            "courier_id",
            "status",
            "display_status",
            "total_amount",
            "created_at",
        )


class OrderSerializer(OrderListSerializer):
    """Full order with lines, shipping snapshot and audit trail."""

    items = OrderItemSerializer(many=True, read_only=True)
    shipping_address = ShippingAddressSerializer(read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta(OrderListSerializer.Meta):
        fields = read_only_fields = OrderListSerializer.Meta.fields + (
            "subtotal",
            "notes",
            "updated_at",
            "shipping_address",
            "items",
            "status_history",
        )


class DeliveryStatsSerializer(serializers.Serializer):
    pending = serializers.IntegerField()
    in_process = serializers.IntegerField()
    delivered = serializers.IntegerField()
    todays_earnings = serializers.DecimalField(max_digits=12, decimal_places=2)
