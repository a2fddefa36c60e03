"""
===============================================================================
TARJETA CRC — tienda/interfaces/api/http/routers/products.py
===============================================================================

Class/Module:
    Products Router

Responsibilities:
    - Exponer el catálogo: lectura pública, escritura con CATALOG_MANAGE.
    - Convertir requests HTTP -> inputs de casos de uso.
    - Traducir CatalogError -> RFC7807.

Collaborators:
    - tienda.application.usecases.catalog
    - tienda.identity.auth_users.require_capability
    - tienda.container (factories DI)
    - schemas.products (DTOs Pydantic)
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from tienda.application.usecases.catalog import (
    CreateProductInput,
    CreateProductUseCase,
    DeleteProductUseCase,
    GetProductUseCase,
    ListAllProductsUseCase,
    ListProductsUseCase,
    SearchProductsUseCase,
    UpdateProductUseCase,
)
from tienda.container import (
    get_create_product_use_case,
    get_delete_product_use_case,
    get_get_product_use_case,
    get_list_all_products_use_case,
    get_list_products_use_case,
    get_search_products_use_case,
    get_update_product_use_case,
)
from tienda.domain.entities import Product
from tienda.identity.auth_users import require_capability
from tienda.identity.capabilities import Capability
from tienda.identity.users import User

from ..error_mapping import raise_catalog_error
from ..schemas.products import (
    CreateProductReq,
    DeleteProductRes,
    ProductRes,
    UpdateProductReq,
)

router = APIRouter(prefix="/products", tags=["products"])


def _to_product_res(product: Product) -> ProductRes:
    return ProductRes(
        id=product.id,
        name=product.name,
        description=product.description,
        price=product.price,
        image=product.image,
        brand=product.brand,
        category=product.category,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


# =============================================================================
# Lectura pública
# =============================================================================


@router.get("", response_model=list[ProductRes])
def list_products(
    brand: str | None = Query(None, max_length=32),
    use_case: ListProductsUseCase = Depends(get_list_products_use_case),
):
    result = use_case.execute(brand=brand)
    if result.error is not None:
        raise_catalog_error(result.error)
    return [_to_product_res(p) for p in result.products]


@router.get("/search", response_model=list[ProductRes])
def search_products(
    q: str | None = Query(None, max_length=200),
    use_case: SearchProductsUseCase = Depends(get_search_products_use_case),
):
    result = use_case.execute(q)
    return [_to_product_res(p) for p in result.products]


@router.get("/all", response_model=list[ProductRes])
def list_all_products(
    use_case: ListAllProductsUseCase = Depends(get_list_all_products_use_case),
    _user: User = Depends(require_capability(Capability.CATALOG_MANAGE)),
):
    result = use_case.execute()
    return [_to_product_res(p) for p in result.products]


@router.get("/{product_id}", response_model=ProductRes)
def get_product(
    product_id: UUID,
    use_case: GetProductUseCase = Depends(get_get_product_use_case),
):
    result = use_case.execute(product_id)
    if result.error is not None:
        raise_catalog_error(result.error, product_id=product_id)
    return _to_product_res(result.product)


# =============================================================================
# Escritura (admin | developer)
# =============================================================================


@router.post("", response_model=ProductRes, status_code=201)
def create_product(
    req: CreateProductReq,
    use_case: CreateProductUseCase = Depends(get_create_product_use_case),
    _user: User = Depends(require_capability(Capability.CATALOG_MANAGE)),
):
    result = use_case.execute(
        CreateProductInput(
            name=req.name,
            price=req.price,
            image=req.image,
            brand=req.brand,
            category=req.category,
            description=req.description,
        )
    )
    if result.error is not None:
        raise_catalog_error(result.error)
    return _to_product_res(result.product)


@router.put("/{product_id}", response_model=ProductRes)
def update_product(
    product_id: UUID,
    req: UpdateProductReq,
    use_case: UpdateProductUseCase = Depends(get_update_product_use_case),
    _user: User = Depends(require_capability(Capability.CATALOG_MANAGE)),
):
    result = use_case.execute(product_id, req.model_dump(exclude_unset=True))
    if result.error is not None:
        raise_catalog_error(result.error, product_id=product_id)
    return _to_product_res(result.product)


@router.delete("/{product_id}", response_model=DeleteProductRes)
def delete_product(
    product_id: UUID,
    use_case: DeleteProductUseCase = Depends(get_delete_product_use_case),
    _user: User = Depends(require_capability(Capability.CATALOG_MANAGE)),
):
    result = use_case.execute(product_id)
    if result.error is not None:
        raise_catalog_error(result.error, product_id=product_id)
    return DeleteProductRes(message="Producto eliminado.", id=product_id)
