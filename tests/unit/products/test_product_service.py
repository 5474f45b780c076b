"""Unit tests for ProductService.

Covers:
- creation with SKU normalisation and duplicate detection.
- partial updates never touch stock.
- soft delete hides the product from look-ups.
- catalog search by name and category.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import ProductAlreadyExists, ProductNotFound
from modules.products.models import Product, ProductCategory
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return ProductService(repository=ProductDjangoRepository())


class TestCreateProduct:
    def test_creates_with_normalised_sku(self, service):
        product = service.create_product(
            CreateProductDTO(
                sku=" med-001 ",
                name="Amoxicilina 500mg",
                price=Decimal("18.50"),
                stock=40,
                category=ProductCategory.MEDICINE,
            )
        )

        assert product.sku == "MED-001"
        assert product.stock == 40
        assert Product.objects.filter(id=product.id).exists()

    def test_duplicate_sku(self, service, make_product):
        make_product(sku="MED-001")

        with pytest.raises(ProductAlreadyExists):
            service.create_product(
                CreateProductDTO(sku="med-001", name="Otro", price=Decimal("1.00"))
            )

    def test_price_must_be_positive(self):
        with pytest.raises(ValidationError):
            CreateProductDTO(sku="X-1", name="Gratis", price=Decimal("0"))

    def test_stock_must_not_be_negative(self):
        with pytest.raises(ValidationError):
            CreateProductDTO(sku="X-1", name="Algo", price=Decimal("1"), stock=-1)


class TestUpdateProduct:
    def test_updates_supplied_fields_only(self, service, make_product):
        product = make_product(name="Vitamina C", price="12.00", stock=8)

        updated = service.update_product(
            str(product.id), UpdateProductDTO(price=Decimal("13.50"))
        )

        assert updated.price == Decimal("13.50")
        assert updated.name == "Vitamina C"
        assert updated.stock == 8

    def test_stock_is_not_part_of_updates(self, service, make_product):
        product = make_product(stock=8)

        # Unknown fields are ignored by the DTO.
        dto = UpdateProductDTO(**{"name": "Vitamina C 1g", "stock": 999})
        service.update_product(str(product.id), dto)

        product.refresh_from_db()
        assert product.stock == 8
        assert product.name == "Vitamina C 1g"

    def test_unknown_product(self, service):
        with pytest.raises(ProductNotFound):
            service.update_product(str(uuid4()), UpdateProductDTO(name="x"))


class TestDeleteProduct:
    def test_soft_delete(self, service, make_product):
        product = make_product()

        service.delete_product(str(product.id))

        assert Product.objects.get(id=product.id).is_deleted
        with pytest.raises(ProductNotFound):
            service.get_product(str(product.id))

    def test_delete_twice(self, service, make_product):
        product = make_product()
        service.delete_product(str(product.id))

        with pytest.raises(ProductNotFound):
            service.delete_product(str(product.id))


class TestSearchProducts:
    def test_by_name_and_category(self, service, make_product):
        target = make_product(name="Paracetamol 500mg")
        make_product(name="Paracetamol infantil", category=ProductCategory.OTHER)
        make_product(name="Protector solar", category=ProductCategory.COSMETIC)

        results = service.search_products(name="paracetamol", category="medicine")

        assert results == [target]

    def test_excludes_inactive(self, service, make_product):
        make_product(name="Jarabe", is_active=False)

        assert service.search_products(name="jarabe") == []
