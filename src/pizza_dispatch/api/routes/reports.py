"""Delivery report endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response

from ...models.domain import CurrentUser
from ...schemas.reports import DeliveryReportResponse
from ...services.reports import build_delivery_report, export_deliveries_workbook, filter_deliveries
from ...services.store import DomainDataStore
from ..dependencies import get_data_store, require_manager

router = APIRouter(prefix="/reports", tags=["reports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _check_period(start: date | None, end: date | None) -> None:
    if start and end and start > end:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A data inicial deve ser anterior à final.")


@router.get("/summary", response_model=DeliveryReportResponse)
def get_report_summary(
    start: date | None = Query(default=None, description="First order date included"),
    end: date | None = Query(default=None, description="Last order date included"),
    courier_id: int | None = Query(default=None, alias="courierId", description="Restrict to one courier"),
    _: CurrentUser = Depends(require_manager),
    store: DomainDataStore = Depends(get_data_store),
) -> DeliveryReportResponse:
    _check_period(start, end)
    report = build_delivery_report(store.deliveries, start=start, end=end, courier_id=courier_id)
    return DeliveryReportResponse.model_validate(report)


@router.get("/export.xlsx", response_class=Response)
def export_report(
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    courier_id: int | None = Query(default=None, alias="courierId"),
    _: CurrentUser = Depends(require_manager),
    store: DomainDataStore = Depends(get_data_store),
) -> Response:
    _check_period(start, end)
    deliveries = filter_deliveries(store.deliveries, start=start, end=end, courier_id=courier_id)
    report = build_delivery_report(deliveries)
    report["start"] = start.isoformat() if start else None
    report["end"] = end.isoformat() if end else None
    payload = export_deliveries_workbook(deliveries, report)

    file_name = f"entregas_{start or 'inicio'}_{end or 'hoje'}.xlsx"
    return Response(
        content=payload,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )
