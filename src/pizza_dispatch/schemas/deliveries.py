"""Delivery request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models.domain import DeliveryDraft, DeliveryStatus, PaymentMethod
from .clients import ClientModel, ClientRequest


class DeliveryModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    order_number: str
    client_id: int
    client: Optional[ClientModel] = None
    courier_id: int
    courier_name: str = ""
    payment_method: PaymentMethod
    order_total: float
    fee_amount: float
    status: DeliveryStatus
    order_timestamp: datetime
    departure_timestamp: Optional[datetime] = None
    delivery_timestamp: Optional[datetime] = None
    delivery_duration_seconds: Optional[int] = None


class DeliveryCreateRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    order_number: str = ""
    client_id: Optional[int] = None
    new_client: Optional[ClientRequest] = Field(
        default=None,
        description="Registers a new client before the delivery; takes precedence over client_id.",
    )
    courier_id: int
    payment_method: PaymentMethod
    order_total: float = Field(..., ge=0)
    fee_amount: float = Field(..., ge=0)

    def to_domain(self) -> DeliveryDraft:
        return DeliveryDraft(
            order_number=self.order_number,
            client_id=self.client_id,
            new_client=self.new_client.to_domain() if self.new_client else None,
            courier_id=self.courier_id,
            payment_method=self.payment_method,
            order_total=self.order_total,
            fee_amount=self.fee_amount,
        )


class DeliveryUpdateRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    order_number: str = ""
    client_id: int
    client: Optional[ClientModel] = Field(
        default=None,
        description="When present the client record is saved too.",
    )
    courier_id: int
    payment_method: PaymentMethod
    order_total: float = Field(..., ge=0)
    fee_amount: float = Field(..., ge=0)
    status: DeliveryStatus


class StatusUpdateRequest(BaseModel):
    status: DeliveryStatus
    timestamp: Optional[datetime] = Field(default=None, description="Defaults to the current time.")


class OperationResponse(BaseModel):
    success: bool
    error: Optional[str] = None
