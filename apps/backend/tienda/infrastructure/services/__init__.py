"""Adaptadores de proveedores externos (pagos, email) + retry."""

from .email_sender import HttpEmailSender, LoggingEmailSender
from .payment_gateway import FakePaymentGateway, HttpPaymentGateway

__all__ = [
    "HttpEmailSender",
    "LoggingEmailSender",
    "HttpPaymentGateway",
    "FakePaymentGateway",
]
