"""
Payment use cases.
"""

from .create_payment_session import (
    CreatePaymentSessionInput,
    CreatePaymentSessionUseCase,
    PaymentError,
    PaymentErrorCode,
    PaymentSessionResult,
)

__all__ = [
    "CreatePaymentSessionInput",
    "CreatePaymentSessionUseCase",
    "PaymentError",
    "PaymentErrorCode",
    "PaymentSessionResult",
]
