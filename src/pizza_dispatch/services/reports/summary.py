"""Delivery report aggregation over a snapshot."""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional

from ...models.domain import Delivery, DeliveryStatus, PaymentMethod


def filter_deliveries(
    deliveries: Iterable[Delivery],
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
    courier_id: Optional[int] = None,
) -> list[Delivery]:
    """Keep deliveries ordered within [start, end] (inclusive) and, optionally, for one courier."""
    selected: list[Delivery] = []
    for delivery in deliveries:
        ordered_on = delivery.order_timestamp.date()
        if start and ordered_on < start:
            continue
        if end and ordered_on > end:
            continue
        if courier_id is not None and delivery.courier_id != courier_id:
            continue
        selected.append(delivery)
    return selected


def _average(values: List[int]) -> Optional[int]:
    if not values:
        return None
    return round(sum(values) / len(values))


def build_delivery_report(
    deliveries: Iterable[Delivery],
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
    courier_id: Optional[int] = None,
) -> dict:
    selected = filter_deliveries(deliveries, start=start, end=end, courier_id=courier_id)
    billable = [d for d in selected if d.status is not DeliveryStatus.CANCELLED]

    status_counts: Counter[DeliveryStatus] = Counter(d.status for d in selected)
    durations = [d.delivery_duration_seconds for d in selected if d.delivery_duration_seconds is not None]

    per_courier: Dict[int, List[Delivery]] = defaultdict(list)
    for delivery in selected:
        per_courier[delivery.courier_id].append(delivery)

    couriers: list[dict] = []
    for cid, items in per_courier.items():
        delivered = [d for d in items if d.status is DeliveryStatus.DELIVERED]
        couriers.append(
            {
                "courierId": cid,
                "courierName": items[0].courier_name,
                "deliveries": len(items),
                "delivered": len(delivered),
                "feesOwed": round(sum(d.fee_amount for d in delivered), 2),
                "averageDurationSeconds": _average(
                    [d.delivery_duration_seconds for d in delivered if d.delivery_duration_seconds is not None]
                ),
            }
        )
    couriers.sort(key=lambda item: (item["courierName"].lower(), item["courierId"]))

    payment_totals: Dict[PaymentMethod, list[float]] = defaultdict(list)
    for delivery in billable:
        payment_totals[delivery.payment_method].append(delivery.order_total)
    payment_methods = [
        {
            "method": method.value,
            "deliveries": len(payment_totals[method]),
            "orderValue": round(sum(payment_totals[method]), 2),
        }
        for method in PaymentMethod
        if payment_totals.get(method)
    ]

    return {
        "start": start.isoformat() if start else None,
        "end": end.isoformat() if end else None,
        "totals": {
            "deliveries": len(selected),
            "byStatus": {status.value: status_counts.get(status, 0) for status in DeliveryStatus},
            "orderValue": round(sum(d.order_total for d in billable), 2),
            "fees": round(sum(d.fee_amount for d in billable), 2),
            "averageDurationSeconds": _average(durations),
        },
        "couriers": couriers,
        "paymentMethods": payment_methods,
    }
