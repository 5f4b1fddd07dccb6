"""Delivery report API schemas."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ReportTotalsModel(BaseModel):
    deliveries: int
    by_status: Dict[str, int] = Field(..., alias="byStatus")
    order_value: float = Field(..., alias="orderValue")
    fees: float
    average_duration_seconds: Optional[int] = Field(None, alias="averageDurationSeconds")

    model_config = {"populate_by_name": True}


class CourierReportModel(BaseModel):
    courier_id: int = Field(..., alias="courierId")
    courier_name: str = Field(..., alias="courierName")
    deliveries: int
    delivered: int
    fees_owed: float = Field(..., alias="feesOwed")
    average_duration_seconds: Optional[int] = Field(None, alias="averageDurationSeconds")

    model_config = {"populate_by_name": True}


class PaymentMethodReportModel(BaseModel):
    method: str
    deliveries: int
    order_value: float = Field(..., alias="orderValue")

    model_config = {"populate_by_name": True}


class DeliveryReportResponse(BaseModel):
    start: Optional[str] = None
    end: Optional[str] = None
    totals: ReportTotalsModel
    couriers: List[CourierReportModel]
    payment_methods: List[PaymentMethodReportModel] = Field(..., alias="paymentMethods")

    model_config = {"populate_by_name": True}
