"""Courier endpoints (manager only)."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ...models.domain import CurrentUser
from ...schemas.couriers import CourierModel, CourierRequest
from ...schemas.deliveries import OperationResponse
from ...services.store import DomainDataStore
from ..dependencies import get_data_store, require_manager, result_response

router = APIRouter(prefix="/couriers", tags=["couriers"])


@router.get("", response_model=List[CourierModel])
def list_couriers(
    _: CurrentUser = Depends(require_manager),
    store: DomainDataStore = Depends(get_data_store),
) -> List[CourierModel]:
    return [CourierModel.model_validate(courier) for courier in store.couriers]


@router.post("", response_model=OperationResponse, status_code=status.HTTP_201_CREATED)
def create_courier(
    payload: CourierRequest,
    _: CurrentUser = Depends(require_manager),
    store: DomainDataStore = Depends(get_data_store),
) -> OperationResponse:
    return result_response(store.create_courier(payload.full_name, payload.email))


@router.put("/{courier_id}", response_model=OperationResponse)
def update_courier(
    courier_id: int,
    payload: CourierRequest,
    _: CurrentUser = Depends(require_manager),
    store: DomainDataStore = Depends(get_data_store),
) -> OperationResponse:
    return result_response(store.update_courier(courier_id, payload.full_name, payload.email))


@router.delete("/{courier_id}", response_model=OperationResponse)
def delete_courier(
    courier_id: int,
    _: CurrentUser = Depends(require_manager),
    store: DomainDataStore = Depends(get_data_store),
) -> OperationResponse:
    return result_response(store.delete_courier(courier_id))
