"""
===============================================================================
TARJETA CRC — domain/cart.py
===============================================================================

Módulo:
    Carrito del cliente como value object (expiración explícita)

Responsabilidades:
    - Representar el carrito que arma el frontend antes del checkout.
    - Podar ítems vencidos con una función pura: prune_expired(cart, now).
    - Agregar/quitar/actualizar ítems devolviendo un carrito NUEVO.
    - Calcular cantidad total y monto total.
    - Traducir el carrito a ítems de pago (title, unit_price, quantity).

Colaboradores:
    - application.usecases.payments: los ítems de pago tienen esta forma.

Reglas:
    - Un ítem vence 4 horas después de su addedAt.
    - Re-agregar un producto existente suma cantidad y renueva addedAt.
    - Ítems sin addedAt (carritos viejos) se sellan con `now` y se conservan.
    - Nada muta: cada operación retorna un Cart distinto.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any

CART_ITEM_TTL = timedelta(hours=4)


@dataclass(frozen=True, slots=True)
class CartItem:
    id: str
    name: str
    price: float
    quantity: int = 1
    image: str | None = None
    brand: str | None = None
    added_at: datetime | None = None

    def is_expired(self, now: datetime, ttl: timedelta = CART_ITEM_TTL) -> bool:
        if self.added_at is None:
            return False
        return now - self.added_at >= ttl


@dataclass(frozen=True, slots=True)
class Cart:
    items: tuple[CartItem, ...] = ()


def prune_expired(cart: Cart, now: datetime, ttl: timedelta = CART_ITEM_TTL) -> Cart:
    """Descarta ítems vencidos; sella con `now` los que no tienen addedAt."""
    kept: list[CartItem] = []
    for item in cart.items:
        if item.added_at is None:
            kept.append(replace(item, added_at=now))
        elif not item.is_expired(now, ttl):
            kept.append(item)
    return Cart(items=tuple(kept))


def add_item(cart: Cart, item: CartItem, now: datetime) -> Cart:
    items = list(cart.items)
    for index, existing in enumerate(items):
        if existing.id == item.id:
            items[index] = replace(
                existing, quantity=existing.quantity + 1, added_at=now
            )
            return Cart(items=tuple(items))
    items.append(replace(item, quantity=1, added_at=now))
    return Cart(items=tuple(items))


def remove_item(cart: Cart, product_id: str) -> Cart:
    return Cart(items=tuple(i for i in cart.items if i.id != product_id))


def update_quantity(cart: Cart, product_id: str, quantity: int) -> Cart:
    """Cantidad <= 0 elimina el ítem; producto ausente deja el carrito igual."""
    if quantity <= 0:
        return remove_item(cart, product_id)
    return Cart(
        items=tuple(
            replace(i, quantity=quantity) if i.id == product_id else i
            for i in cart.items
        )
    )


def cart_count(cart: Cart) -> int:
    return sum(item.quantity for item in cart.items)


def cart_total(cart: Cart) -> float:
    return sum(item.price * item.quantity for item in cart.items)


def hours_until_expiration(
    item: CartItem, now: datetime, ttl: timedelta = CART_ITEM_TTL
) -> int | None:
    """Horas enteras restantes (0 si ya venció, None si no tiene addedAt)."""
    if item.added_at is None:
        return None
    remaining = ttl - (now - item.added_at)
    if remaining <= timedelta(0):
        return 0
    return int(remaining.total_seconds() // 3600)


def to_payment_items(cart: Cart) -> list[dict[str, Any]]:
    return [
        {"title": item.name, "unit_price": item.price, "quantity": item.quantity}
        for item in cart.items
    ]
