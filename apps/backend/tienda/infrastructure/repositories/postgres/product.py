"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/product.py
============================================================
Class: PostgresProductRepository

Responsibilities:
  - CRUD del catálogo en la tabla `products`.
  - Listado por marca (más recientes primero).
  - Búsqueda ILIKE sobre name / description / brand.

Collaborators:
  - postgres.base.PostgresRepository
  - domain.entities.Product / Brand / Category

Constraints:
  - Sin reglas de negocio: la validación de marca/categoría vive en el caso de uso.
  - update() solo acepta columnas de la whitelist.
============================================================
"""

from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

from ....domain.entities import Brand, Category, Product
from ....domain.ledger import utcnow
from .base import PostgresRepository, like_pattern

_PRODUCT_COLUMNS = """
    id, name, description, price, image, brand, category, created_at, updated_at
"""

_ORDER_BY = "ORDER BY created_at DESC, id DESC"

# R: Columnas editables (los keys vienen del caso de uso, no del request crudo).
_UPDATABLE = ("name", "description", "price", "image", "brand", "category")


def _row_to_product(row: tuple) -> Product:
    return Product(
        id=row[0],
        name=row[1],
        description=row[2],
        price=float(row[3]),
        image=row[4],
        brand=Brand(row[5]),
        category=Category(row[6]),
        created_at=row[7],
        updated_at=row[8],
    )


def _db_value(value: Any) -> Any:
    return value.value if isinstance(value, (Brand, Category)) else value


class PostgresProductRepository(PostgresRepository):
    """R: Implementación PostgreSQL del catálogo."""

    def create(self, product: Product) -> Product:
        now = utcnow()
        row = self._fetchone(
            query=f"""
                INSERT INTO products
                    (id, name, description, price, image, brand, category, created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING {_PRODUCT_COLUMNS}
            """,
            params=(
                product.id,
                product.name,
                product.description,
                product.price,
                product.image,
                product.brand.value,
                product.category.value,
                product.created_at or now,
                product.updated_at or now,
            ),
            context_msg="PostgresProductRepository: create failed",
            extra={"product_id": str(product.id)},
        )
        return _row_to_product(row)

    def get(self, product_id: UUID) -> Optional[Product]:
        row = self._fetchone(
            query=f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE id = %s",
            params=(product_id,),
            context_msg="PostgresProductRepository: get failed",
            extra={"product_id": str(product_id)},
        )
        return _row_to_product(row) if row else None

    def list_products(
        self, *, brand: Brand | None = None, limit: int | None = None
    ) -> list[Product]:
        where_sql = ""
        params: list[object] = []
        if brand is not None:
            where_sql = "WHERE brand = %s"
            params.append(brand.value)

        limit_sql = ""
        if limit is not None:
            limit_sql = "LIMIT %s"
            params.append(limit)

        rows = self._fetchall(
            query=f"""
                SELECT {_PRODUCT_COLUMNS}
                FROM products
                {where_sql}
                {_ORDER_BY}
                {limit_sql}
            """,
            params=params,
            context_msg="PostgresProductRepository: list failed",
            extra={"brand": brand.value if brand else None},
        )
        return [_row_to_product(r) for r in rows]

    def search(self, text: str, *, limit: int = 50) -> list[Product]:
        pattern = like_pattern(text.strip())
        rows = self._fetchall(
            query=f"""
                SELECT {_PRODUCT_COLUMNS}
                FROM products
                WHERE name ILIKE %s
                   OR COALESCE(description, '') ILIKE %s
                   OR brand ILIKE %s
                {_ORDER_BY}
                LIMIT %s
            """,
            params=(pattern, pattern, pattern, limit),
            context_msg="PostgresProductRepository: search failed",
            extra={"query_len": len(text)},
        )
        return [_row_to_product(r) for r in rows]

    def update(self, product_id: UUID, changes: dict[str, Any]) -> Optional[Product]:
        fields = [key for key in _UPDATABLE if key in changes]
        if not fields:
            return self.get(product_id)

        set_sql = ", ".join(f"{key} = %s" for key in fields)
        params: list[object] = [_db_value(changes[key]) for key in fields]
        params.extend([utcnow(), product_id])

        row = self._fetchone(
            query=f"""
                UPDATE products
                SET {set_sql}, updated_at = %s
                WHERE id = %s
                RETURNING {_PRODUCT_COLUMNS}
            """,
            params=params,
            context_msg="PostgresProductRepository: update failed",
            extra={"product_id": str(product_id), "fields": fields},
        )
        return _row_to_product(row) if row else None

    def delete(self, product_id: UUID) -> bool:
        affected = self._execute(
            query="DELETE FROM products WHERE id = %s",
            params=(product_id,),
            context_msg="PostgresProductRepository: delete failed",
            extra={"product_id": str(product_id)},
        )
        return affected > 0
