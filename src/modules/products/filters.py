import django_filters

from modules.products.models import Product, ProductCategory


class ProductFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    sku = django_filters.CharFilter(field_name="sku", lookup_expr="iexact")
    category = django_filters.ChoiceFilter(choices=ProductCategory.choices)
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    active = django_filters.BooleanFilter(field_name="is_active")

    class Meta:
        model = Product
        fields = ["name", "sku", "category", "min_price", "max_price", "active"]
