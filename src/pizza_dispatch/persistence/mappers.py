"""Conversions between Supabase rows (snake_case, Portuguese columns) and domain objects."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from ..models.domain import (
    Client,
    ClientData,
    Courier,
    Delivery,
    DeliveryDraft,
    DeliveryStatus,
    PaymentMethod,
    Profile,
    Role,
)


def parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _blank_to_none(value: Any) -> Optional[str]:
    # Empty strings are stored as NULL, matching the old web client.
    if value is None:
        return None
    text = str(value)
    return text if text else None


def profile_from_row(row: dict[str, Any]) -> Profile:
    return Profile(
        id=str(row["id"]),
        full_name=row.get("nome_completo") or "",
        role=Role(row["cargo"]),
    )


def profile_to_row(identity_id: str, full_name: str, role: Role) -> dict[str, Any]:
    return {"id": identity_id, "nome_completo": full_name, "cargo": role.value}


def client_from_row(row: dict[str, Any]) -> Client:
    return Client(
        id=int(row["id"]),
        full_name=row.get("nome_completo") or "",
        street_and_number=row.get("rua_numero") or "",
        neighborhood=row.get("bairro") or "",
        phone=_blank_to_none(row.get("telefone")),
    )


def client_to_row(data: ClientData | Client) -> dict[str, Any]:
    return {
        "nome_completo": data.full_name,
        "rua_numero": data.street_and_number,
        "bairro": data.neighborhood,
        "telefone": _blank_to_none(data.phone),
    }


def courier_from_row(row: dict[str, Any]) -> Courier:
    return Courier(
        id=int(row["id"]),
        full_name=row.get("nome_completo") or "",
        linked_identity_id=_blank_to_none(row.get("usuario_id")),
        active=bool(row.get("ativo", True)),
    )


def courier_to_row(identity_id: str, full_name: str) -> dict[str, Any]:
    return {"usuario_id": identity_id, "nome_completo": full_name, "ativo": True}


def delivery_from_row(row: dict[str, Any]) -> Delivery:
    """Map an `entregas` row, including the embedded `clientes`/`entregadores` summaries."""
    embedded_client = row.get("clientes")
    embedded_courier = row.get("entregadores") or {}
    duration = row.get("duracao_entrega_segundos")

    return Delivery(
        id=int(row["id"]),
        order_number=row.get("numero_pedido") or "",
        client_id=int(row["cliente_id"]),
        client=client_from_row(embedded_client) if embedded_client else None,
        courier_id=int(row["entregador_id"]),
        courier_name=embedded_courier.get("nome_completo") or "",
        payment_method=PaymentMethod(row["forma_pagamento"]),
        order_total=float(row.get("valor_pedido") or 0),
        fee_amount=float(row.get("valor_corrida") or 0),
        status=DeliveryStatus(row["status"]),
        order_timestamp=parse_timestamp(row.get("data_hora_pedido")),
        departure_timestamp=parse_timestamp(row.get("data_hora_saida")),
        delivery_timestamp=parse_timestamp(row.get("data_hora_entrega")),
        delivery_duration_seconds=int(duration) if duration is not None else None,
    )


def new_delivery_row(draft: DeliveryDraft, client_id: int, ordered_at: datetime) -> dict[str, Any]:
    return {
        "numero_pedido": draft.order_number,
        "cliente_id": client_id,
        "entregador_id": draft.courier_id,
        "forma_pagamento": PaymentMethod(draft.payment_method).value,
        "valor_pedido": draft.order_total,
        "valor_corrida": draft.fee_amount,
        "status": DeliveryStatus.AWAITING.value,
        "data_hora_pedido": format_timestamp(ordered_at),
    }


def delivery_update_row(delivery: Delivery) -> dict[str, Any]:
    """Columns an edit may change; timing columns are owned by status updates."""
    return {
        "numero_pedido": delivery.order_number,
        "cliente_id": delivery.client_id,
        "entregador_id": delivery.courier_id,
        "forma_pagamento": PaymentMethod(delivery.payment_method).value,
        "valor_pedido": delivery.order_total,
        "valor_corrida": delivery.fee_amount,
        "status": DeliveryStatus(delivery.status).value,
    }
