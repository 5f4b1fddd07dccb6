"""Client endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ...models.domain import CurrentUser
from ...schemas.clients import ClientModel, ClientRequest
from ...schemas.deliveries import OperationResponse
from ...services.store import DomainDataStore
from ..dependencies import get_data_store, require_manager, require_user, result_response

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("", response_model=List[ClientModel])
def list_clients(
    _: CurrentUser = Depends(require_user),
    store: DomainDataStore = Depends(get_data_store),
) -> List[ClientModel]:
    return [ClientModel.model_validate(client) for client in store.clients]


@router.post("", response_model=OperationResponse, status_code=status.HTTP_201_CREATED)
def create_client(
    payload: ClientRequest,
    _: CurrentUser = Depends(require_manager),
    store: DomainDataStore = Depends(get_data_store),
) -> OperationResponse:
    return result_response(store.create_client(payload.to_domain()))


@router.put("/{client_id}", response_model=OperationResponse)
def update_client(
    client_id: int,
    payload: ClientRequest,
    _: CurrentUser = Depends(require_manager),
    store: DomainDataStore = Depends(get_data_store),
) -> OperationResponse:
    return result_response(store.update_client(client_id, payload.to_domain()))


@router.delete("/{client_id}", response_model=OperationResponse)
def delete_client(
    client_id: int,
    _: CurrentUser = Depends(require_manager),
    store: DomainDataStore = Depends(get_data_store),
) -> OperationResponse:
    return result_response(store.delete_client(client_id))
