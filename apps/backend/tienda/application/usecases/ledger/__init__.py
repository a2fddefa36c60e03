"""
Transaction ledger use cases.
"""

from .create_test_order import (
    TEST_ORDER_NOTE,
    CreateTestOrderInput,
    CreateTestOrderUseCase,
    line_items_from_payload,
)
from .ledger_results import (
    LedgerError,
    LedgerErrorCode,
    LedgerStats,
    MyOrdersResult,
    TransactionPage,
    TransactionResult,
    WebhookOutcome,
    WebhookResult,
)
from .manage_transaction import (
    GetTransactionUseCase,
    TransitionStatusInput,
    TransitionStatusUseCase,
    UpdateNotesUseCase,
    UpdateShippingInput,
    UpdateShippingUseCase,
)
from .query_transactions import (
    GetMyOrderUseCase,
    MyOrdersUseCase,
    QueryTransactionsInput,
    QueryTransactionsUseCase,
    TransactionStatsUseCase,
)
from .record_webhook import RecordWebhookUseCase

__all__ = [
    "CreateTestOrderInput",
    "CreateTestOrderUseCase",
    "GetMyOrderUseCase",
    "GetTransactionUseCase",
    "LedgerError",
    "LedgerErrorCode",
    "LedgerStats",
    "MyOrdersResult",
    "MyOrdersUseCase",
    "QueryTransactionsInput",
    "QueryTransactionsUseCase",
    "RecordWebhookUseCase",
    "TEST_ORDER_NOTE",
    "TransactionPage",
    "TransactionResult",
    "TransactionStatsUseCase",
    "TransitionStatusInput",
    "TransitionStatusUseCase",
    "UpdateNotesUseCase",
    "UpdateShippingInput",
    "UpdateShippingUseCase",
    "WebhookOutcome",
    "WebhookResult",
    "line_items_from_payload",
]
