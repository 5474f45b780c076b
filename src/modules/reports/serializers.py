"""Report DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.reports.models import WeeklySalesReport, WeeklySalesReportItem


class WeeklyReportRequestSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()


class AutomaticReportsSerializer(serializers.Serializer):
    weeks = serializers.IntegerField(min_value=1, max_value=52, required=False)


class YearQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2000, max_value=9999)


class LatestQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=100, default=10)


class DailyProfitQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)


class WeeklySalesReportItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)
    product_sku = serializers.CharField(source="product.sku", read_only=True)

    class Meta:
        model = WeeklySalesReportItem
        fields = ["product_id", "product_name", "product_sku", "units_sold", "revenue"]
        read_only_fields = fields


class WeeklySalesReportSerializer(serializers.ModelSerializer):
    items = WeeklySalesReportItemSerializer(many=True, read_only=True)
    best_selling_product_name = serializers.CharField(
        source="best_selling_product.name", read_only=True, default=None
    )

    class Meta:
        model = WeeklySalesReport
        fields = [
            "id",
            "period_key",
            "week_start",
            "week_end",
            "total_orders",
            "total_units",
            "total_revenue",
            "best_selling_product_id",
            "best_selling_product_name",
            "best_selling_category",
            "created_at",
            "items",
        ]
        read_only_fields = fields


class DailyOrderSerializer(serializers.Serializer):
    order_number = serializers.CharField()
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    units = serializers.IntegerField()
    created_at = serializers.DateTimeField()


class DailyProfitReportSerializer(serializers.Serializer):
    date = serializers.DateField()
    total_profit = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_orders = serializers.IntegerField()
    total_units = serializers.IntegerField()
    orders = DailyOrderSerializer(many=True)


class DashboardQuerySerializer(serializers.Serializer):
    low_stock = serializers.IntegerField(min_value=0, required=False)
    recent = serializers.IntegerField(min_value=1, max_value=100, required=False)


class LowStockProductSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    sku = serializers.CharField()
    name = serializers.CharField()
    stock = serializers.IntegerField()


class RecentOrderSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    order_number = serializers.CharField()
    username = serializers.CharField()
    status = serializers.CharField()
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    created_at = serializers.DateTimeField()


class DashboardSerializer(serializers.Serializer):
    total_products = serializers.IntegerField()
    total_orders = serializers.IntegerField()
    total_users = serializers.IntegerField()
    orders_by_status = serializers.DictField(child=serializers.IntegerField())
    users_by_role = serializers.DictField(child=serializers.IntegerField())
    low_stock_threshold = serializers.IntegerField()
    low_stock_products = LowStockProductSerializer(many=True)
    recent_orders = RecentOrderSerializer(many=True)
