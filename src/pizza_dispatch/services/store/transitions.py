"""Delivery status transitions and the timing columns they write."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Optional

from ...models.domain import Delivery, DeliveryStatus
from ...models.errors import BusinessRuleViolation
from ...persistence.mappers import format_timestamp

FORWARD_TRANSITIONS: dict[DeliveryStatus, frozenset[DeliveryStatus]] = {
    DeliveryStatus.AWAITING: frozenset({DeliveryStatus.EN_ROUTE, DeliveryStatus.CANCELLED}),
    DeliveryStatus.EN_ROUTE: frozenset({DeliveryStatus.DELIVERED, DeliveryStatus.CANCELLED}),
    DeliveryStatus.DELIVERED: frozenset(),
    DeliveryStatus.CANCELLED: frozenset(),
}


def is_forward_transition(current: DeliveryStatus, target: DeliveryStatus) -> bool:
    return target in FORWARD_TRANSITIONS[current]


def ensure_transition_allowed(delivery: Optional[Delivery], target: DeliveryStatus) -> None:
    """Reject a status write that does not move the delivery forward.

    Only consulted when strict transitions are enabled; without a known current
    record there is nothing to compare against and the write is allowed.
    """
    if delivery is None:
        return
    if not is_forward_transition(delivery.status, target):
        raise BusinessRuleViolation(
            f"Não é possível alterar o status de '{delivery.status.value}' para '{target.value}'."
        )


def delivery_duration_seconds(departed_at: datetime, delivered_at: datetime) -> int:
    return math.floor((delivered_at - departed_at).total_seconds())


def status_update_fields(
    delivery: Optional[Delivery],
    status: DeliveryStatus,
    timestamp: datetime,
) -> dict[str, Any]:
    """Build the column updates for a status change.

    Departure time, delivery time and duration are written once; a repeated
    transition keeps the stored values.
    """
    fields: dict[str, Any] = {"status": status.value}

    if status is DeliveryStatus.EN_ROUTE:
        if delivery is None or delivery.departure_timestamp is None:
            fields["data_hora_saida"] = format_timestamp(timestamp)
    elif status is DeliveryStatus.DELIVERED:
        if delivery is None or delivery.delivery_timestamp is None:
            fields["data_hora_entrega"] = format_timestamp(timestamp)
            if (
                delivery is not None
                and delivery.departure_timestamp is not None
                and delivery.delivery_duration_seconds is None
            ):
                fields["duracao_entrega_segundos"] = delivery_duration_seconds(
                    delivery.departure_timestamp, timestamp
                )
    return fields
