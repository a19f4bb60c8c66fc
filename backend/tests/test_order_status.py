"""
Tests for the order status transition table.
"""

import re
from datetime import datetime, timezone

import pytest

from rest_api.services.domain import generate_order_number
from shared.config.constants import (
    CUSTOMER_CANCELLABLE_STATUSES,
    OrderStatus,
    get_allowed_order_transitions,
    validate_order_transition,
)


class TestOrderTransitions:
    """Forward-only lifecycle with cancellation up to preparing."""

    @pytest.mark.parametrize(
        "current,new",
        [
            (OrderStatus.PLACED, OrderStatus.CONFIRMED),
            (OrderStatus.CONFIRMED, OrderStatus.PREPARING),
            (OrderStatus.PREPARING, OrderStatus.READY_FOR_PICKUP),
            (OrderStatus.READY_FOR_PICKUP, OrderStatus.OUT_FOR_DELIVERY),
            (OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED),
            (OrderStatus.PLACED, OrderStatus.CANCELLED),
            (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
            (OrderStatus.PREPARING, OrderStatus.CANCELLED),
        ],
    )
    def test_allowed(self, current, new):
        assert validate_order_transition(current, new) is True

    @pytest.mark.parametrize(
        "current,new",
        [
            (OrderStatus.PLACED, OrderStatus.PREPARING),
            (OrderStatus.PLACED, OrderStatus.DELIVERED),
            (OrderStatus.CONFIRMED, OrderStatus.PLACED),
            (OrderStatus.READY_FOR_PICKUP, OrderStatus.CANCELLED),
            (OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED),
            (OrderStatus.PREPARING, OrderStatus.PREPARING),
        ],
    )
    def test_rejected(self, current, new):
        assert validate_order_transition(current, new) is False

    @pytest.mark.parametrize("terminal", OrderStatus.TERMINAL)
    def test_terminal_states_have_no_exit(self, terminal):
        assert get_allowed_order_transitions(terminal) == []
        for status in OrderStatus.ALL:
            assert validate_order_transition(terminal, status) is False

    def test_unknown_status(self):
        assert validate_order_transition("lost", OrderStatus.CONFIRMED) is False
        assert get_allowed_order_transitions("lost") == []

    def test_customer_cancellation_window(self):
        """Customers may cancel only before the kitchen starts."""
        assert CUSTOMER_CANCELLABLE_STATUSES == {OrderStatus.PLACED, OrderStatus.CONFIRMED}


class TestOrderNumber:
    """ORD<epoch-ms><6 hex>"""

    def test_format(self):
        now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        number = generate_order_number(now)
        assert re.fullmatch(rf"ORD{int(now.timestamp() * 1000)}[0-9A-F]{{6}}", number)

    def test_same_instant_differs(self):
        now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        assert len({generate_order_number(now) for _ in range(50)}) > 1
