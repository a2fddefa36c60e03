"""
===============================================================================
TARJETA CRC — tienda/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorios, adapters, casos de uso) siguiendo DIP.
  - Exponer factories para FastAPI (Depends).
  - Mantener singletons con caching (lru_cache) para repositorios y adapters.
  - Centralizar decisiones runtime basadas en Settings:
      * APP_ENV test -> repositorios in-memory
      * FAKE_PAYMENTS / test -> gateway de pagos sin red
      * sin EMAIL_API_KEY / test -> emails solo logueados

Colaboradores:
  - tienda.crosscutting.config.get_settings
  - tienda.domain.repositories.* / tienda.domain.services.* (puertos)
  - tienda.infrastructure.* (implementaciones)
  - tienda.application.usecases.* (casos de uso)

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO depende de FastAPI (solo expone factories).
  - Los tests limpian los caches con `reset_container()`.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.usecases.auth import (
    AssignRoleUseCase,
    ChangePasswordUseCase,
    ConsumePasswordResetUseCase,
    ListUsersUseCase,
    LoginUserUseCase,
    RegisterUserUseCase,
    RequestPasswordResetUseCase,
    ResetPasswordByAdminUseCase,
    UpdateProfileUseCase,
)
from .application.usecases.catalog import (
    CreateProductUseCase,
    DeleteProductUseCase,
    GetProductUseCase,
    ListAllProductsUseCase,
    ListProductsUseCase,
    SearchProductsUseCase,
    UpdateProductUseCase,
)
from .application.usecases.ledger import (
    CreateTestOrderUseCase,
    GetMyOrderUseCase,
    GetTransactionUseCase,
    MyOrdersUseCase,
    QueryTransactionsUseCase,
    RecordWebhookUseCase,
    TransactionStatsUseCase,
    TransitionStatusUseCase,
    UpdateNotesUseCase,
    UpdateShippingUseCase,
)
from .application.usecases.orders import (
    CreateOrderUseCase,
    GetOrderUseCase,
    ListOrdersUseCase,
    OrderStatsUseCase,
    UpdateOrderStatusUseCase,
)
from .application.usecases.payments import CreatePaymentSessionUseCase
from .application.usecases.site_settings import (
    GetAllSettingsUseCase,
    GetSettingUseCase,
    PutSettingUseCase,
    ResetSettingUseCase,
)
from .crosscutting.config import get_settings
from .domain.repositories import (
    OrderRepository,
    ProductRepository,
    SettingRepository,
    TransactionRepository,
    UserRepository,
)
from .domain.services import EmailSender, PaymentGateway
from .infrastructure.repositories import (
    InMemoryOrderRepository,
    InMemoryProductRepository,
    InMemorySettingRepository,
    InMemoryTransactionRepository,
    InMemoryUserRepository,
    PostgresOrderRepository,
    PostgresProductRepository,
    PostgresSettingRepository,
    PostgresTransactionRepository,
    PostgresUserRepository,
)
from .infrastructure.services import (
    FakePaymentGateway,
    HttpEmailSender,
    HttpPaymentGateway,
    LoggingEmailSender,
)

# =============================================================================
# Helpers internos
# =============================================================================


def _is_test_env() -> bool:
    return get_settings().is_test()


# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    """Usuarios (in-memory en test; Postgres en runtime)."""
    if _is_test_env():
        return InMemoryUserRepository()
    return PostgresUserRepository()


@lru_cache(maxsize=1)
def get_product_repository() -> ProductRepository:
    if _is_test_env():
        return InMemoryProductRepository()
    return PostgresProductRepository()


@lru_cache(maxsize=1)
def get_transaction_repository() -> TransactionRepository:
    if _is_test_env():
        return InMemoryTransactionRepository()
    return PostgresTransactionRepository()


@lru_cache(maxsize=1)
def get_order_repository() -> OrderRepository:
    if _is_test_env():
        return InMemoryOrderRepository()
    return PostgresOrderRepository()


@lru_cache(maxsize=1)
def get_setting_repository() -> SettingRepository:
    if _is_test_env():
        return InMemorySettingRepository()
    return PostgresSettingRepository()


# =============================================================================
# Adapters externos (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_payment_gateway() -> PaymentGateway:
    """
    Gateway de pagos.

    Regla:
      - FAKE_PAYMENTS o entorno test -> FakePaymentGateway (sin red)
      - En otro caso -> HttpPaymentGateway (firma obligatoria en producción)
    """
    settings = get_settings()
    if settings.fake_payments or _is_test_env():
        return FakePaymentGateway(
            base_url=f"{settings.frontend_url.rstrip('/')}/pages/checkout-fake.html",
            webhook_secret=settings.payment_webhook_secret,
        )
    return HttpPaymentGateway(
        api_url=settings.payment_api_url,
        project_id=settings.payment_project_id,
        secret_key=settings.payment_secret_key,
        webhook_secret=settings.payment_webhook_secret,
        timeout_seconds=settings.payment_timeout_seconds,
        require_signature=settings.is_production(),
    )


@lru_cache(maxsize=1)
def get_email_sender() -> EmailSender:
    """Email transaccional (modo log si no hay API key o en test)."""
    settings = get_settings()
    if not settings.email_api_key or _is_test_env():
        return LoggingEmailSender()
    return HttpEmailSender(
        api_url=settings.email_api_url,
        api_key=settings.email_api_key,
        sender_name=settings.email_sender_name,
        sender_address=settings.email_sender_address,
        timeout_seconds=settings.email_timeout_seconds,
    )


def reset_container() -> None:
    """Limpia singletons (tests / recarga de Settings)."""
    for factory in (
        get_user_repository,
        get_product_repository,
        get_transaction_repository,
        get_order_repository,
        get_setting_repository,
        get_payment_gateway,
        get_email_sender,
    ):
        factory.cache_clear()


# =============================================================================
# Casos de uso: auth + usuarios
# =============================================================================


def get_register_user_use_case() -> RegisterUserUseCase:
    return RegisterUserUseCase(get_user_repository())


def get_login_user_use_case() -> LoginUserUseCase:
    return LoginUserUseCase(get_user_repository())


def get_change_password_use_case() -> ChangePasswordUseCase:
    return ChangePasswordUseCase(get_user_repository())


def get_update_profile_use_case() -> UpdateProfileUseCase:
    return UpdateProfileUseCase(get_user_repository())


def get_request_password_reset_use_case() -> RequestPasswordResetUseCase:
    settings = get_settings()
    return RequestPasswordResetUseCase(
        get_user_repository(),
        get_email_sender(),
        frontend_url=settings.frontend_url,
        ttl_minutes=settings.password_reset_ttl_minutes,
    )


def get_consume_password_reset_use_case() -> ConsumePasswordResetUseCase:
    return ConsumePasswordResetUseCase(get_user_repository())


def get_list_users_use_case() -> ListUsersUseCase:
    return ListUsersUseCase(get_user_repository())


def get_assign_role_use_case() -> AssignRoleUseCase:
    return AssignRoleUseCase(get_user_repository())


def get_reset_password_by_admin_use_case() -> ResetPasswordByAdminUseCase:
    return ResetPasswordByAdminUseCase(
        get_user_repository(),
        default_password=get_settings().admin_reset_default_password,
    )


# =============================================================================
# Casos de uso: catálogo
# =============================================================================


def get_list_products_use_case() -> ListProductsUseCase:
    return ListProductsUseCase(get_product_repository())


def get_list_all_products_use_case() -> ListAllProductsUseCase:
    return ListAllProductsUseCase(get_product_repository())


def get_search_products_use_case() -> SearchProductsUseCase:
    return SearchProductsUseCase(get_product_repository())


def get_get_product_use_case() -> GetProductUseCase:
    return GetProductUseCase(get_product_repository())


def get_create_product_use_case() -> CreateProductUseCase:
    return CreateProductUseCase(get_product_repository())


def get_update_product_use_case() -> UpdateProductUseCase:
    return UpdateProductUseCase(get_product_repository())


def get_delete_product_use_case() -> DeleteProductUseCase:
    return DeleteProductUseCase(get_product_repository())


# =============================================================================
# Casos de uso: settings
# =============================================================================


def get_get_setting_use_case() -> GetSettingUseCase:
    return GetSettingUseCase(get_setting_repository())


def get_get_all_settings_use_case() -> GetAllSettingsUseCase:
    return GetAllSettingsUseCase(get_setting_repository())


def get_put_setting_use_case() -> PutSettingUseCase:
    return PutSettingUseCase(get_setting_repository())


def get_reset_setting_use_case() -> ResetSettingUseCase:
    return ResetSettingUseCase(get_setting_repository())


# =============================================================================
# Casos de uso: pagos + ledger
# =============================================================================


def get_create_payment_session_use_case() -> CreatePaymentSessionUseCase:
    return CreatePaymentSessionUseCase(get_payment_gateway())


def get_record_webhook_use_case() -> RecordWebhookUseCase:
    return RecordWebhookUseCase(get_transaction_repository())


def get_create_test_order_use_case() -> CreateTestOrderUseCase:
    return CreateTestOrderUseCase(get_transaction_repository())


def get_query_transactions_use_case() -> QueryTransactionsUseCase:
    return QueryTransactionsUseCase(get_transaction_repository())


def get_transaction_stats_use_case() -> TransactionStatsUseCase:
    return TransactionStatsUseCase(get_transaction_repository())


def get_get_transaction_use_case() -> GetTransactionUseCase:
    return GetTransactionUseCase(get_transaction_repository())


def get_transition_status_use_case() -> TransitionStatusUseCase:
    return TransitionStatusUseCase(get_transaction_repository())


def get_update_shipping_use_case() -> UpdateShippingUseCase:
    return UpdateShippingUseCase(get_transaction_repository())


def get_update_notes_use_case() -> UpdateNotesUseCase:
    return UpdateNotesUseCase(get_transaction_repository())


def get_my_orders_use_case() -> MyOrdersUseCase:
    return MyOrdersUseCase(get_transaction_repository())


def get_get_my_order_use_case() -> GetMyOrderUseCase:
    return GetMyOrderUseCase(get_transaction_repository())


# =============================================================================
# Casos de uso: pedidos (fulfillment)
# =============================================================================


def get_create_order_use_case() -> CreateOrderUseCase:
    return CreateOrderUseCase(get_order_repository())


def get_list_orders_use_case() -> ListOrdersUseCase:
    return ListOrdersUseCase(get_order_repository())


def get_order_stats_use_case() -> OrderStatsUseCase:
    return OrderStatsUseCase(get_order_repository())


def get_get_order_use_case() -> GetOrderUseCase:
    return GetOrderUseCase(get_order_repository())


def get_update_order_status_use_case() -> UpdateOrderStatusUseCase:
    return UpdateOrderStatusUseCase(get_order_repository())
