from datetime import datetime, timedelta, timezone

import pytest

from pizza_dispatch.models.domain import Delivery, DeliveryStatus, PaymentMethod
from pizza_dispatch.models.errors import BusinessRuleViolation, ErrorCode
from pizza_dispatch.services.store.transitions import (
    delivery_duration_seconds,
    ensure_transition_allowed,
    is_forward_transition,
    status_update_fields,
)

ORDERED_AT = datetime(2024, 5, 10, 19, 0, tzinfo=timezone.utc)


def _delivery(status: DeliveryStatus, **kwargs) -> Delivery:
    return Delivery(
        id=1,
        order_number="P001",
        client_id=1,
        courier_id=3,
        payment_method=PaymentMethod.PIX,
        order_total=50.0,
        fee_amount=8.0,
        status=status,
        order_timestamp=ORDERED_AT,
        **kwargs,
    )


def test_duration_is_floored_to_whole_seconds():
    departed = ORDERED_AT
    assert delivery_duration_seconds(departed, departed + timedelta(seconds=125, milliseconds=900)) == 125


def test_en_route_sets_departure_once():
    moment = ORDERED_AT + timedelta(minutes=5)

    fields = status_update_fields(_delivery(DeliveryStatus.AWAITING), DeliveryStatus.EN_ROUTE, moment)
    assert fields == {"status": "Em Rota", "data_hora_saida": moment.isoformat()}

    already_out = _delivery(DeliveryStatus.EN_ROUTE, departure_timestamp=moment)
    assert status_update_fields(already_out, DeliveryStatus.EN_ROUTE, moment + timedelta(minutes=1)) == {
        "status": "Em Rota"
    }


def test_delivered_writes_time_and_duration():
    departed = ORDERED_AT + timedelta(minutes=5)
    delivered = departed + timedelta(seconds=125)

    fields = status_update_fields(
        _delivery(DeliveryStatus.EN_ROUTE, departure_timestamp=departed), DeliveryStatus.DELIVERED, delivered
    )

    assert fields == {
        "status": "Entregue",
        "data_hora_entrega": delivered.isoformat(),
        "duracao_entrega_segundos": 125,
    }


def test_unknown_delivery_still_gets_timestamps():
    fields = status_update_fields(None, DeliveryStatus.DELIVERED, ORDERED_AT)

    assert fields == {"status": "Entregue", "data_hora_entrega": ORDERED_AT.isoformat()}


@pytest.mark.parametrize("status", [DeliveryStatus.AWAITING, DeliveryStatus.CANCELLED])
def test_other_statuses_write_only_the_status(status):
    assert status_update_fields(_delivery(DeliveryStatus.EN_ROUTE), status, ORDERED_AT) == {"status": status.value}


def test_forward_transitions():
    assert is_forward_transition(DeliveryStatus.AWAITING, DeliveryStatus.EN_ROUTE)
    assert is_forward_transition(DeliveryStatus.EN_ROUTE, DeliveryStatus.CANCELLED)
    assert not is_forward_transition(DeliveryStatus.AWAITING, DeliveryStatus.DELIVERED)
    assert not is_forward_transition(DeliveryStatus.CANCELLED, DeliveryStatus.AWAITING)


def test_ensure_transition_allowed_raises_business_rule_violation():
    with pytest.raises(BusinessRuleViolation) as excinfo:
        ensure_transition_allowed(_delivery(DeliveryStatus.DELIVERED), DeliveryStatus.EN_ROUTE)

    assert excinfo.value.code is ErrorCode.BUSINESS_RULE_VIOLATED
    ensure_transition_allowed(None, DeliveryStatus.DELIVERED)
