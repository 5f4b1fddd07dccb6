"""Delivery endpoints.

Managers see and edit every delivery. Couriers only see the deliveries
assigned to them and may only change their status.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...models.domain import Client, CurrentUser, Delivery, DeliveryStatus
from ...schemas.deliveries import (
    DeliveryCreateRequest,
    DeliveryModel,
    DeliveryUpdateRequest,
    OperationResponse,
    StatusUpdateRequest,
)
from ...services.store import DomainDataStore
from ..dependencies import get_data_store, require_manager, require_user, result_response

router = APIRouter(prefix="/deliveries", tags=["deliveries"])


def _visible_deliveries(user: CurrentUser, store: DomainDataStore) -> tuple[Delivery, ...]:
    if user.is_manager:
        return store.deliveries
    return store.deliveries_for_identity(user.id)


def _visible_delivery(delivery_id: int, user: CurrentUser, store: DomainDataStore) -> Delivery:
    delivery = next((d for d in _visible_deliveries(user, store) if d.id == delivery_id), None)
    if delivery is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Entrega {delivery_id} não encontrada.")
    return delivery


@router.get("", response_model=List[DeliveryModel])
def list_deliveries(
    status_filter: DeliveryStatus | None = Query(default=None, alias="status", description="Optional status filter"),
    user: CurrentUser = Depends(require_user),
    store: DomainDataStore = Depends(get_data_store),
) -> List[DeliveryModel]:
    deliveries = _visible_deliveries(user, store)
    if status_filter is not None:
        deliveries = tuple(d for d in deliveries if d.status is status_filter)
    return [DeliveryModel.model_validate(d) for d in deliveries]


@router.get("/{delivery_id}", response_model=DeliveryModel)
def get_delivery(
    delivery_id: int,
    user: CurrentUser = Depends(require_user),
    store: DomainDataStore = Depends(get_data_store),
) -> DeliveryModel:
    return DeliveryModel.model_validate(_visible_delivery(delivery_id, user, store))


@router.post("", response_model=OperationResponse, status_code=status.HTTP_201_CREATED)
def create_delivery(
    payload: DeliveryCreateRequest,
    _: CurrentUser = Depends(require_manager),
    store: DomainDataStore = Depends(get_data_store),
) -> OperationResponse:
    return result_response(store.create_delivery(payload.to_domain()))


@router.put("/{delivery_id}", response_model=OperationResponse)
def update_delivery(
    delivery_id: int,
    payload: DeliveryUpdateRequest,
    user: CurrentUser = Depends(require_manager),
    store: DomainDataStore = Depends(get_data_store),
) -> OperationResponse:
    current = _visible_delivery(delivery_id, user, store)
    if payload.client is not None and payload.client.id != payload.client_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="O cliente enviado não corresponde ao cliente da entrega.",
        )
    edited = replace(
        current,
        order_number=payload.order_number,
        client_id=payload.client_id,
        client=Client(**payload.client.model_dump()) if payload.client else None,
        courier_id=payload.courier_id,
        payment_method=payload.payment_method,
        order_total=payload.order_total,
        fee_amount=payload.fee_amount,
        status=payload.status,
    )
    return result_response(store.update_delivery(edited))


@router.patch("/{delivery_id}/status", response_model=OperationResponse)
def update_delivery_status(
    delivery_id: int,
    payload: StatusUpdateRequest,
    user: CurrentUser = Depends(require_user),
    store: DomainDataStore = Depends(get_data_store),
) -> OperationResponse:
    _visible_delivery(delivery_id, user, store)
    return result_response(store.update_delivery_status(delivery_id, payload.status, payload.timestamp))


@router.delete("/{delivery_id}", response_model=OperationResponse)
def delete_delivery(
    delivery_id: int,
    _: CurrentUser = Depends(require_manager),
    store: DomainDataStore = Depends(get_data_store),
) -> OperationResponse:
    return result_response(store.delete_delivery(delivery_id))
