"""Excel export of a delivery report."""

from __future__ import annotations

from datetime import datetime, timezone
from io import BytesIO
from typing import Iterable, Optional

from openpyxl import Workbook

from ...models.domain import Delivery

DELIVERY_COLUMNS = (
    "Data/Hora",
    "Pedido",
    "Cliente",
    "Bairro",
    "Entregador",
    "Pagamento",
    "Valor Pedido",
    "Taxa",
    "Status",
    "Saída",
    "Entrega",
    "Duração (min)",
)


def _excel_datetime(value: Optional[datetime]) -> Optional[datetime]:
    # Excel cells cannot hold timezone-aware datetimes.
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def export_deliveries_workbook(deliveries: Iterable[Delivery], report: dict) -> bytes:
    workbook = Workbook()

    summary = workbook.active
    summary.title = "Resumo"
    totals = report["totals"]
    summary.append(["Período", report.get("start") or "-", report.get("end") or "-"])
    summary.append(["Entregas", totals["deliveries"]])
    for status, count in totals["byStatus"].items():
        summary.append([status, count])
    summary.append(["Valor dos pedidos", totals["orderValue"]])
    summary.append(["Taxas", totals["fees"]])
    summary.append(["Duração média (s)", totals["averageDurationSeconds"]])
    summary.append([])
    summary.append(["Entregador", "Entregas", "Entregues", "Taxas a pagar", "Duração média (s)"])
    for courier in report["couriers"]:
        summary.append(
            [
                courier["courierName"],
                courier["deliveries"],
                courier["delivered"],
                courier["feesOwed"],
                courier["averageDurationSeconds"],
            ]
        )

    sheet = workbook.create_sheet("Entregas")
    sheet.append(list(DELIVERY_COLUMNS))
    for delivery in deliveries:
        duration = delivery.delivery_duration_seconds
        sheet.append(
            [
                _excel_datetime(delivery.order_timestamp),
                delivery.order_number,
                delivery.client.full_name if delivery.client else "",
                delivery.client.neighborhood if delivery.client else "",
                delivery.courier_name,
                delivery.payment_method.value,
                delivery.order_total,
                delivery.fee_amount,
                delivery.status.value,
                _excel_datetime(delivery.departure_timestamp),
                _excel_datetime(delivery.delivery_timestamp),
                round(duration / 60, 1) if duration is not None else None,
            ]
        )

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
