"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/product.py
============================================================
Class: InMemoryProductRepository

Responsibilities:
  - Catálogo en memoria (tests / CI) con el mismo ordering que Postgres.
  - Búsqueda case-insensitive delegada en Product.matches.

Constraints:
  - Thread-safe (Lock). Copias para no compartir instancias mutables.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from ....domain.entities import Brand, Product
from ....domain.ledger import utcnow

_UPDATABLE = ("name", "description", "price", "image", "brand", "category")


class InMemoryProductRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._products: Dict[UUID, Product] = {}

    @staticmethod
    def _sorted(items: Iterable[Product]) -> List[Product]:
        oldest = datetime.min.replace(tzinfo=timezone.utc)
        return sorted(
            (replace(p) for p in items),
            key=lambda p: p.created_at or oldest,
            reverse=True,
        )

    def create(self, product: Product) -> Product:
        now = utcnow()
        stored = replace(
            product,
            created_at=product.created_at or now,
            updated_at=product.updated_at or now,
        )
        with self._lock:
            self._products[stored.id] = stored
        return replace(stored)

    def get(self, product_id: UUID) -> Optional[Product]:
        with self._lock:
            product = self._products.get(product_id)
        return replace(product) if product else None

    def list_products(
        self, *, brand: Brand | None = None, limit: int | None = None
    ) -> list[Product]:
        with self._lock:
            values = list(self._products.values())
        items = self._sorted(p for p in values if brand is None or p.brand == brand)
        return items[:limit] if limit is not None else items

    def search(self, text: str, *, limit: int = 50) -> list[Product]:
        with self._lock:
            values = list(self._products.values())
        return self._sorted(p for p in values if p.matches(text))[:limit]

    def update(self, product_id: UUID, changes: dict[str, Any]) -> Optional[Product]:
        fields = {k: v for k, v in changes.items() if k in _UPDATABLE}
        with self._lock:
            product = self._products.get(product_id)
            if product is None:
                return None
            if fields:
                product = replace(product, **fields, updated_at=utcnow())
                self._products[product_id] = product
            return replace(product)

    def delete(self, product_id: UUID) -> bool:
        with self._lock:
            return self._products.pop(product_id, None) is not None
