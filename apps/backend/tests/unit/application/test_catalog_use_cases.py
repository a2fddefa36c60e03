"""
Name: Catalog Use Case Tests

Responsibilities:
  - Product validation (brand / category / price)
  - Public list by brand, search minimum length, partial updates, delete
"""

from uuid import uuid4

import pytest
from tienda.application.usecases.catalog import (
    CatalogErrorCode,
    CreateProductInput,
    CreateProductUseCase,
    DeleteProductUseCase,
    GetProductUseCase,
    ListProductsUseCase,
    SearchProductsUseCase,
    UpdateProductUseCase,
)
from tienda.domain.entities import Brand, Category
from tienda.infrastructure.repositories.in_memory import InMemoryProductRepository

pytestmark = pytest.mark.unit


@pytest.fixture
def products() -> InMemoryProductRepository:
    return InMemoryProductRepository()


def _create(products, **overrides):
    data = {
        "name": "Kaiak",
        "price": "1500.50",
        "image": "/img/kaiak.png",
        "brand": "Natura",
        "category": "perfumeria",
    }
    data.update(overrides)
    return CreateProductUseCase(products).execute(CreateProductInput(**data))


class TestCreateProduct:
    def test_create_normalizes_fields(self, products):
        result = _create(products)

        assert result.error is None
        assert result.product.brand == Brand.NATURA
        assert result.product.category == Category.PERFUMERIA
        assert result.product.price == 1500.5

    def test_category_defaults_to_otros(self, products):
        assert _create(products, category=None).product.category == Category.OTROS

    @pytest.mark.parametrize(
        "overrides",
        [
            {"brand": "revlon"},
            {"category": "juguetes"},
            {"price": -1},
            {"price": "gratis"},
            {"price": None},
            {"name": "  "},
        ],
    )
    def test_invalid_fields(self, products, overrides):
        result = _create(products, **overrides)

        assert result.error.code == CatalogErrorCode.VALIDATION_ERROR


class TestReadProducts:
    def test_list_by_brand(self, products):
        _create(products, name="Kaiak", brand="natura")
        _create(products, name="Far Away", brand="avon")

        result = ListProductsUseCase(products).execute(brand="AVON")

        assert [p.name for p in result.products] == ["Far Away"]

    def test_list_with_invalid_brand(self, products):
        result = ListProductsUseCase(products).execute(brand="revlon")

        assert result.error.code == CatalogErrorCode.VALIDATION_ERROR

    def test_search_requires_two_characters(self, products):
        _create(products, name="Kaiak")
        search = SearchProductsUseCase(products)

        assert search.execute("k").products == []
        assert [p.name for p in search.execute("kai").products] == ["Kaiak"]

    def test_get_missing(self, products):
        result = GetProductUseCase(products).execute(uuid4())

        assert result.error.code == CatalogErrorCode.NOT_FOUND


class TestUpdateAndDelete:
    def test_partial_update(self, products):
        product = _create(products).product

        result = UpdateProductUseCase(products).execute(product.id, {"price": 99})

        assert result.product.price == 99
        assert result.product.name == "Kaiak"

    def test_update_rejects_invalid_brand(self, products):
        product = _create(products).product

        result = UpdateProductUseCase(products).execute(product.id, {"brand": "x"})

        assert result.error.code == CatalogErrorCode.VALIDATION_ERROR

    def test_update_missing(self, products):
        result = UpdateProductUseCase(products).execute(uuid4(), {"price": 1})

        assert result.error.code == CatalogErrorCode.NOT_FOUND

    def test_delete(self, products):
        product = _create(products).product
        delete = DeleteProductUseCase(products)

        assert delete.execute(product.id).deleted is True
        assert delete.execute(product.id).error.code == CatalogErrorCode.NOT_FOUND
