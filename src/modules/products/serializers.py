"""Catalog response shape and the restock payload.

Writes are validated by the pydantic DTOs; these serializers only render
products and parse the restock quantity.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = read_only_fields = (
            "id",
            "sku",
            "name",
            "description",
            "price",
            "stock",
            "category",
            "is_active",
            "created_at",
            "updated_at",
        )


class RestockSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
