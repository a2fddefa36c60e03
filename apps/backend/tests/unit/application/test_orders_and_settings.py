"""
Name: Fulfillment Orders + Site Settings Use Case Tests

Responsibilities:
  - Order creation (pending status, total from subtotals), status updates
  - Order stats (cancelled excluded from sales, month window, top products)
  - Settings defaults, partial upsert, reset, unknown keys
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from tienda.application.usecases.orders import (
    CreateOrderInput,
    CreateOrderUseCase,
    GetOrderUseCase,
    ListOrdersUseCase,
    OrderErrorCode,
    OrderStatsUseCase,
    UpdateOrderStatusUseCase,
)
from tienda.application.usecases.site_settings import (
    GetAllSettingsUseCase,
    GetSettingUseCase,
    PutSettingUseCase,
    ResetSettingUseCase,
    SettingsErrorCode,
)
from tienda.domain.entities import OrderItem
from tienda.domain.ledger import OrderStatus
from tienda.identity.users import User, UserRole
from tienda.infrastructure.repositories.in_memory import (
    InMemoryOrderRepository,
    InMemorySettingRepository,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def orders() -> InMemoryOrderRepository:
    return InMemoryOrderRepository()


@pytest.fixture
def settings_repo() -> InMemorySettingRepository:
    return InMemorySettingRepository()


def _buyer() -> User:
    return User(id=uuid4(), email="ana@example.com", password_hash="x", role=UserRole.USER)


def _order(orders, items=None, payment_id="PAY-1"):
    items = items or [
        OrderItem.of("p1", "Kaiak", "natura", 100, 2),
        OrderItem.of("p2", "Far Away", "avon", 50, 1),
    ]
    return CreateOrderUseCase(orders).execute(
        CreateOrderInput(
            user=_buyer(), items=items, payment_id=payment_id, payment_status="approved"
        )
    )


class TestOrders:
    def test_create_starts_pending_with_total(self, orders):
        order = _order(orders).order

        assert order.status == OrderStatus.PENDING
        assert order.total == 250
        assert len(order.status_history) == 1
        assert order.user_name == "ana@example.com"

    def test_create_requires_items(self, orders):
        result = CreateOrderUseCase(orders).execute(
            CreateOrderInput(user=_buyer(), items=[], payment_id="P", payment_status="x")
        )

        assert result.error.code == OrderErrorCode.VALIDATION_ERROR

    def test_update_status_records_actor(self, orders):
        order = _order(orders).order
        actor = uuid4()

        result = UpdateOrderStatusUseCase(orders).execute(
            order.id, "shipped", actor_id=actor
        )

        assert result.order.status == OrderStatus.SHIPPED
        assert result.order.status_history[-1].changed_by == actor

    def test_update_status_rejects_payment_vocabulary(self, orders):
        order = _order(orders).order

        result = UpdateOrderStatusUseCase(orders).execute(
            order.id, "approved", actor_id=None
        )

        assert result.error.code == OrderErrorCode.VALIDATION_ERROR

    def test_list_filter_all_means_no_filter(self, orders):
        first = _order(orders).order
        _order(orders, payment_id="PAY-2")
        UpdateOrderStatusUseCase(orders).execute(first.id, "cancelled", actor_id=None)
        list_orders = ListOrdersUseCase(orders)

        assert len(list_orders.execute(status="all").orders) == 2
        assert len(list_orders.execute(status="cancelled").orders) == 1

    def test_list_with_date_bounds_without_offset(self, orders):
        _order(orders)
        list_orders = ListOrdersUseCase(orders)

        inside = list_orders.execute(start=datetime(2020, 1, 1), end=datetime(2999, 1, 1))
        after = list_orders.execute(start=datetime(2999, 1, 1))

        assert len(inside.orders) == 1
        assert after.orders == []

    def test_stats_with_naive_now(self, orders):
        order = _order(orders).order

        stats = OrderStatsUseCase(orders).execute(now=datetime.now())

        assert stats.total_sales == order.total

    def test_get_missing(self, orders):
        assert GetOrderUseCase(orders).execute(uuid4()).error.code == OrderErrorCode.NOT_FOUND

    def test_stats(self, orders):
        kept = _order(orders).order
        cancelled = _order(
            orders, items=[OrderItem.of("p1", "Kaiak", "natura", 100, 1)], payment_id="PAY-2"
        ).order
        UpdateOrderStatusUseCase(orders).execute(cancelled.id, "cancelled", actor_id=None)

        stats = OrderStatsUseCase(orders).execute(now=datetime.now(timezone.utc))

        assert stats.total_orders == 2
        assert stats.total_sales == kept.total
        assert stats.month_sales == kept.total
        assert stats.orders_by_status == {"pending": 1, "cancelled": 1}
        top = stats.top_products[0]
        assert (top.product_id, top.total_quantity, top.total_revenue) == ("p1", 3, 300)


class TestSiteSettings:
    def test_read_unset_key_returns_default(self, settings_repo):
        result = GetSettingUseCase(settings_repo).execute("siteColors")

        assert result.setting.is_default is True
        assert result.setting.value["primaryColor"] == "#f5a938"

    def test_put_partial_then_read(self, settings_repo):
        actor = uuid4()
        PutSettingUseCase(settings_repo).execute(
            "siteColors", {"primaryColor": "#000000"}, actor_id=actor
        )

        setting = GetSettingUseCase(settings_repo).execute("siteColors").setting

        assert setting.is_default is False
        assert setting.value["primaryColor"] == "#000000"
        assert setting.value["bodyBg"] == "#f8f9fb"
        assert setting.updated_by == actor

    def test_reset_returns_default(self, settings_repo):
        PutSettingUseCase(settings_repo).execute("banners", {"avon": "/x.png"}, actor_id=None)

        reset = ResetSettingUseCase(settings_repo).execute("banners")

        assert reset.setting.is_default is True
        assert GetSettingUseCase(settings_repo).execute("banners").setting.is_default

    def test_unknown_key(self, settings_repo):
        result = PutSettingUseCase(settings_repo).execute("fonts", {}, actor_id=None)

        assert result.error.code == SettingsErrorCode.VALIDATION_ERROR

    def test_invalid_value(self, settings_repo):
        put = PutSettingUseCase(settings_repo)

        assert put.execute("banners", ["a"], actor_id=None).error is not None
        assert put.execute("banners", {"avon": 3.5}, actor_id=None).error is not None

    def test_get_all_lists_every_key(self, settings_repo):
        keys = [s.key for s in GetAllSettingsUseCase(settings_repo).execute().settings]

        assert keys == ["siteColors", "banners"]
