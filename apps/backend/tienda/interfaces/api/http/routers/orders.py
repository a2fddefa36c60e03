"""
===============================================================================
TARJETA CRC — tienda/interfaces/api/http/routers/orders.py
===============================================================================

Responsibilities:
    - Alta de pedidos de fulfillment por el usuario autenticado.
    - Back-office: listado, estadísticas, detalle y cambio de estado
      (ORDERS_MANAGE).

Collaborators:
    - tienda.application.usecases.orders
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from tienda.application.usecases.orders import (
    CreateOrderInput,
    CreateOrderUseCase,
    GetOrderUseCase,
    ListOrdersUseCase,
    OrderStatsUseCase,
    UpdateOrderStatusUseCase,
)
from tienda.container import (
    get_create_order_use_case,
    get_get_order_use_case,
    get_list_orders_use_case,
    get_order_stats_use_case,
    get_update_order_status_use_case,
)
from tienda.domain.entities import OrderItem
from tienda.identity.auth_users import require_capability, require_user
from tienda.identity.capabilities import Capability
from tienda.identity.users import User

from ..error_mapping import raise_order_error
from ..schemas.orders import (
    CreateOrderReq,
    OrderRes,
    OrdersListRes,
    OrderStatsRes,
    TopProductRes,
    UpdateOrderStatusReq,
    to_order_res,
)

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=OrderRes, status_code=201)
def create_order(
    req: CreateOrderReq,
    use_case: CreateOrderUseCase = Depends(get_create_order_use_case),
    user: User = Depends(require_user()),
):
    items = [
        OrderItem.of(
            product_id=item.product_id,
            name=item.name,
            brand=item.brand,
            price=item.price,
            quantity=item.quantity,
        )
        for item in req.items
    ]
    result = use_case.execute(
        CreateOrderInput(
            user=user,
            items=items,
            payment_id=req.payment_id,
            payment_status=req.payment_status,
            payment_method=req.payment_method,
        )
    )
    if result.error is not None:
        raise_order_error(result.error)
    return to_order_res(result.order)


@router.get("", response_model=OrdersListRes)
def list_orders(
    status: str | None = Query(None, max_length=32),
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
    use_case: ListOrdersUseCase = Depends(get_list_orders_use_case),
    _user: User = Depends(require_capability(Capability.ORDERS_MANAGE)),
):
    result = use_case.execute(status=status, start=start_date, end=end_date)
    if result.error is not None:
        raise_order_error(result.error)
    return OrdersListRes(orders=[to_order_res(o) for o in result.orders])


@router.get("/stats", response_model=OrderStatsRes)
def order_stats(
    use_case: OrderStatsUseCase = Depends(get_order_stats_use_case),
    _user: User = Depends(require_capability(Capability.ORDERS_MANAGE)),
):
    stats = use_case.execute()
    return OrderStatsRes(
        total_sales=stats.total_sales,
        total_orders=stats.total_orders,
        month_sales=stats.month_sales,
        orders_by_status=stats.orders_by_status,
        top_products=[
            TopProductRes(
                product_id=p.product_id,
                name=p.name,
                brand=p.brand,
                total_quantity=p.total_quantity,
                total_revenue=p.total_revenue,
            )
            for p in stats.top_products
        ],
    )


@router.get("/{order_id}", response_model=OrderRes)
def get_order(
    order_id: UUID,
    use_case: GetOrderUseCase = Depends(get_get_order_use_case),
    _user: User = Depends(require_capability(Capability.ORDERS_MANAGE)),
):
    result = use_case.execute(order_id)
    if result.error is not None:
        raise_order_error(result.error, order_id=order_id)
    return to_order_res(result.order)


@router.put("/{order_id}/status", response_model=OrderRes)
def update_order_status(
    order_id: UUID,
    req: UpdateOrderStatusReq,
    use_case: UpdateOrderStatusUseCase = Depends(get_update_order_status_use_case),
    user: User = Depends(require_capability(Capability.ORDERS_MANAGE)),
):
    result = use_case.execute(order_id, req.status, actor_id=user.id)
    if result.error is not None:
        raise_order_error(result.error, order_id=order_id)
    return to_order_res(result.order)
