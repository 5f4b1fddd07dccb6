from datetime import datetime, timezone

from pizza_dispatch.models.domain import ClientData, DeliveryDraft, DeliveryStatus, PaymentMethod, Role
from pizza_dispatch.models.errors import RemoteServiceError, describe_remote_error
from pizza_dispatch.persistence.mappers import (
    client_to_row,
    courier_from_row,
    delivery_from_row,
    new_delivery_row,
    parse_timestamp,
    profile_from_row,
)

from .fakes import client_row, delivery_row


def test_parse_timestamp_assumes_utc_for_naive_values():
    assert parse_timestamp("2024-05-10T19:00:00") == datetime(2024, 5, 10, 19, 0, tzinfo=timezone.utc)
    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None


def test_delivery_from_row_reads_embedded_summaries():
    row = delivery_row(7, courier_id=3, client_id=1, payment="Cartão de Crédito", duracao_entrega_segundos=90)
    row["clientes"] = client_row(1, "Joana")
    row["entregadores"] = {"id": 3, "nome_completo": "Bruno"}

    delivery = delivery_from_row(row)

    assert delivery.client.full_name == "Joana"
    assert delivery.courier_name == "Bruno"
    assert delivery.payment_method is PaymentMethod.CREDIT_CARD
    assert delivery.status is DeliveryStatus.AWAITING
    assert delivery.delivery_duration_seconds == 90


def test_delivery_from_row_without_embeds():
    delivery = delivery_from_row(delivery_row(7, courier_id=3, client_id=1))

    assert delivery.client is None
    assert delivery.courier_name == ""


def test_new_delivery_row_is_always_awaiting():
    draft = DeliveryDraft(
        order_number="10", courier_id=3, payment_method="Dinheiro", order_total=20.0, fee_amount=4.0, client_id=1
    )
    ordered_at = datetime(2024, 5, 10, 19, 0, tzinfo=timezone.utc)

    row = new_delivery_row(draft, 1, ordered_at)

    assert row["status"] == "Aguardando"
    assert row["forma_pagamento"] == "Dinheiro"
    assert row["data_hora_pedido"] == "2024-05-10T19:00:00+00:00"


def test_client_to_row_stores_blank_phone_as_null():
    row = client_to_row(ClientData(full_name="Ana", street_and_number="Rua A, 1", neighborhood="Centro", phone=""))

    assert row == {"nome_completo": "Ana", "rua_numero": "Rua A, 1", "bairro": "Centro", "telefone": None}


def test_profile_and_courier_rows():
    assert profile_from_row({"id": "u1", "nome_completo": "G", "cargo": "gerente"}).role is Role.MANAGER
    courier = courier_from_row({"id": 3, "nome_completo": "Bruno", "usuario_id": "u2", "ativo": True})
    assert courier.linked_identity_id == "u2"


def test_describe_remote_error_prefers_message_attribute():
    class PostgrestLikeError(Exception):
        def __init__(self):
            super().__init__({"message": "duplicate key", "code": "23505"})
            self.message = "duplicate key"

    assert describe_remote_error(PostgrestLikeError()) == "duplicate key"
    assert describe_remote_error(RemoteServiceError("fora do ar")) == "fora do ar"
    assert describe_remote_error(Exception()) == "Erro desconhecido ao comunicar com o servidor."
