"""
===============================================================================
TARJETA CRC — tienda/interfaces/api/http/routers/transactions.py
===============================================================================

Class/Module:
    Transactions Router (ledger)

Responsibilities:
    - Back-office: listado paginado, estadísticas, detalle, transición de
      estado, notas y envío (LEDGER_READ / LEDGER_MANAGE).
    - Vista "mis pedidos" para el usuario autenticado.

Collaborators:
    - tienda.application.usecases.ledger
    - tienda.identity.auth_users (require_user / require_capability)

Notes:
    - Las rutas literales (/stats, /my-orders) van antes de /{transaction_id}.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from tienda.application.usecases.ledger import (
    GetMyOrderUseCase,
    GetTransactionUseCase,
    MyOrdersUseCase,
    QueryTransactionsInput,
    QueryTransactionsUseCase,
    TransactionStatsUseCase,
    TransitionStatusInput,
    TransitionStatusUseCase,
    UpdateNotesUseCase,
    UpdateShippingInput,
    UpdateShippingUseCase,
)
from tienda.application.usecases.ledger.query_transactions import (
    DEFAULT_PAGE_LIMIT,
    MAX_PAGE_LIMIT,
    MY_ORDERS_LIMIT,
)
from tienda.container import (
    get_get_my_order_use_case,
    get_get_transaction_use_case,
    get_my_orders_use_case,
    get_query_transactions_use_case,
    get_transaction_stats_use_case,
    get_transition_status_use_case,
    get_update_notes_use_case,
    get_update_shipping_use_case,
)
from tienda.identity.auth_users import require_capability, require_user
from tienda.identity.capabilities import Capability
from tienda.identity.users import User

from ..error_mapping import raise_ledger_error
from ..schemas.transactions import (
    AggregateRes,
    MyOrderRes,
    MyOrdersRes,
    PaginationRes,
    StatsRes,
    TransactionEnvelopeRes,
    TransactionRes,
    TransactionsPageRes,
    UpdateNotesReq,
    UpdateShippingReq,
    UpdateStatusReq,
    to_total_res,
    to_transaction_res,
)

router = APIRouter(prefix="/transactions", tags=["transactions"])


# =============================================================================
# Back-office (lectura)
# =============================================================================


@router.get("", response_model=TransactionsPageRes)
def list_transactions(
    status: str | None = Query(None, max_length=32),
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
    search: str | None = Query(None, max_length=200),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    skip: int = Query(0, ge=0),
    use_case: QueryTransactionsUseCase = Depends(get_query_transactions_use_case),
    _user: User = Depends(require_capability(Capability.LEDGER_READ)),
):
    page = use_case.execute(
        QueryTransactionsInput(
            status=status,
            start=start_date,
            end=end_date,
            search=search,
            limit=limit,
            skip=skip,
        )
    )
    if page.error is not None:
        raise_ledger_error(page.error)
    return TransactionsPageRes(
        transactions=[to_transaction_res(tx) for tx in page.transactions],
        pagination=PaginationRes(
            total=page.total, limit=page.limit, skip=page.skip, has_more=page.has_more
        ),
    )


@router.get("/stats", response_model=StatsRes)
def transaction_stats(
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
    use_case: TransactionStatsUseCase = Depends(get_transaction_stats_use_case),
    _user: User = Depends(require_capability(Capability.LEDGER_READ)),
):
    stats = use_case.execute(start=start_date, end=end_date)
    return StatsRes(
        total=to_total_res(stats.total),
        approved=to_total_res(stats.approved),
        by_status={
            status.value: AggregateRes(count=agg.count, amount=agg.amount)
            for status, agg in stats.by_status.items()
        },
        recent=[to_transaction_res(tx) for tx in stats.recent],
    )


# =============================================================================
# Mis pedidos (usuario autenticado)
# =============================================================================


@router.get("/my-orders", response_model=MyOrdersRes)
def my_orders(
    status: str | None = Query(None, max_length=32),
    limit: int = Query(MY_ORDERS_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    use_case: MyOrdersUseCase = Depends(get_my_orders_use_case),
    user: User = Depends(require_user()),
):
    result = use_case.execute(user, status=status, limit=limit)
    if result.error is not None:
        raise_ledger_error(result.error)
    return MyOrdersRes(
        orders=[to_transaction_res(tx, for_owner=True) for tx in result.orders],
        stats=result.counts,
    )


@router.get("/my-orders/{transaction_id}", response_model=MyOrderRes)
def my_order(
    transaction_id: UUID,
    use_case: GetMyOrderUseCase = Depends(get_get_my_order_use_case),
    user: User = Depends(require_user()),
):
    result = use_case.execute(user, transaction_id)
    if result.error is not None:
        raise_ledger_error(result.error, transaction_id=transaction_id)
    return MyOrderRes(order=to_transaction_res(result.transaction, for_owner=True))


@router.get("/{transaction_id}", response_model=TransactionRes)
def get_transaction(
    transaction_id: UUID,
    use_case: GetTransactionUseCase = Depends(get_get_transaction_use_case),
    _user: User = Depends(require_capability(Capability.LEDGER_READ)),
):
    result = use_case.execute(transaction_id)
    if result.error is not None:
        raise_ledger_error(result.error, transaction_id=transaction_id)
    return to_transaction_res(result.transaction)


# =============================================================================
# Back-office (escritura)
# =============================================================================


@router.put("/{transaction_id}/status", response_model=TransactionEnvelopeRes)
def update_status(
    transaction_id: UUID,
    req: UpdateStatusReq,
    use_case: TransitionStatusUseCase = Depends(get_transition_status_use_case),
    user: User = Depends(require_capability(Capability.LEDGER_MANAGE)),
):
    result = use_case.execute(
        TransitionStatusInput(
            transaction_id=transaction_id,
            status=req.status,
            actor_id=user.id,
            note=req.note,
        )
    )
    if result.error is not None:
        raise_ledger_error(result.error, transaction_id=transaction_id)
    return TransactionEnvelopeRes(
        message="Estado actualizado.",
        transaction=to_transaction_res(result.transaction),
    )


@router.put("/{transaction_id}/notes", response_model=TransactionEnvelopeRes)
def update_notes(
    transaction_id: UUID,
    req: UpdateNotesReq,
    use_case: UpdateNotesUseCase = Depends(get_update_notes_use_case),
    _user: User = Depends(require_capability(Capability.LEDGER_MANAGE)),
):
    result = use_case.execute(transaction_id, req.notes)
    if result.error is not None:
        raise_ledger_error(result.error, transaction_id=transaction_id)
    return TransactionEnvelopeRes(
        message="Notas actualizadas.",
        transaction=to_transaction_res(result.transaction),
    )


@router.put("/{transaction_id}/shipping", response_model=TransactionEnvelopeRes)
def update_shipping(
    transaction_id: UUID,
    req: UpdateShippingReq,
    use_case: UpdateShippingUseCase = Depends(get_update_shipping_use_case),
    user: User = Depends(require_capability(Capability.LEDGER_MANAGE)),
):
    result = use_case.execute(
        UpdateShippingInput(
            transaction_id=transaction_id,
            actor_id=user.id,
            shipping_status=req.shipping_status,
            tracking_number=req.tracking_number,
            note=req.note,
        )
    )
    if result.error is not None:
        raise_ledger_error(result.error, transaction_id=transaction_id)
    return TransactionEnvelopeRes(
        message="Envío actualizado.",
        transaction=to_transaction_res(result.transaction),
    )
