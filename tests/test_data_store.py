from dataclasses import replace
from datetime import datetime, timedelta, timezone

from pizza_dispatch.db.supabase import CLIENTS_TABLE, COURIERS_TABLE, DELIVERIES_TABLE
from pizza_dispatch.models.domain import ClientData, DeliveryDraft, DeliveryStatus, PaymentMethod
from pizza_dispatch.services.store import PENDING_DELIVERIES_MESSAGE, DomainDataStore

from .fakes import FakeAuthError, client_row, courier_row, delivery_row


def _seed_basic(fake):
    fake.seed(COURIERS_TABLE, courier_row(3, "Bruno", "courier-uuid"), courier_row(4, "Carla", "other-uuid"))
    fake.seed(CLIENTS_TABLE, client_row(1, "Joana"))


def test_fetch_all_loads_collections_with_embedded_summaries(store, fake_supabase):
    _seed_basic(fake_supabase)
    fake_supabase.seed(
        DELIVERIES_TABLE,
        delivery_row(1, courier_id=3, client_id=1, ordered_at="2024-05-10T18:00:00+00:00"),
        delivery_row(2, courier_id=4, client_id=1, ordered_at="2024-05-10T20:00:00+00:00"),
    )

    assert store.fetch_all() is True

    assert [d.id for d in store.deliveries] == [2, 1]
    assert store.deliveries[0].client.full_name == "Joana"
    assert store.deliveries[0].courier_name == "Carla"
    assert [c.full_name for c in store.couriers] == ["Bruno", "Carla"]
    assert store.error is None
    assert store.loading is False


def test_fetch_all_skips_inactive_couriers(store, fake_supabase):
    fake_supabase.seed(COURIERS_TABLE, courier_row(3, "Bruno"), courier_row(5, "Diego", active=False))

    store.fetch_all()

    assert [c.id for c in store.couriers] == [3]


def test_fetch_all_is_idempotent(store, fake_supabase):
    _seed_basic(fake_supabase)
    fake_supabase.seed(DELIVERIES_TABLE, delivery_row(1, courier_id=3, client_id=1))

    store.fetch_all()
    first = store.snapshot
    store.fetch_all()

    assert store.snapshot == first


def test_fetch_all_failure_keeps_previous_snapshot(store, fake_supabase):
    _seed_basic(fake_supabase)
    store.fetch_all()
    before = store.snapshot

    fake_supabase.failures[(CLIENTS_TABLE, "select")] = FakeAuthError("connection refused")
    assert store.fetch_all() is False

    assert store.error == "connection refused"
    assert store.snapshot is before
    assert store.loading is False


def test_store_without_configuration_reports_error():
    store = DomainDataStore(lambda: None)

    assert store.fetch_all() is False
    assert store.error == "Banco de dados não configurado."
    result = store.delete_client(1)
    assert result.success is False


def test_create_delivery_with_new_client(store, fake_supabase):
    _seed_basic(fake_supabase)
    draft = DeliveryDraft(
        order_number="1042",
        courier_id=3,
        payment_method=PaymentMethod.PIX,
        order_total=50.0,
        fee_amount=8.0,
        new_client=ClientData(full_name="Ana", street_and_number="Rua das Flores, 12", neighborhood="Centro"),
    )

    result = store.create_delivery(draft)

    assert result.success is True
    ana = next(row for row in fake_supabase.rows(CLIENTS_TABLE) if row["nome_completo"] == "Ana")
    [created] = fake_supabase.rows(DELIVERIES_TABLE)
    assert created["cliente_id"] == ana["id"]
    assert created["status"] == "Aguardando"
    assert created["forma_pagamento"] == "Pix"
    assert created["valor_pedido"] == 50.0
    assert created["valor_corrida"] == 8.0
    # Reloaded after the write.
    assert store.deliveries[0].client.full_name == "Ana"
    assert store.deliveries[0].status is DeliveryStatus.AWAITING


def test_create_delivery_for_existing_client_writes_only_the_delivery(store, fake_supabase):
    _seed_basic(fake_supabase)
    draft = DeliveryDraft(
        order_number="7",
        courier_id=3,
        payment_method=PaymentMethod.CASH,
        order_total=30.0,
        fee_amount=5.0,
        client_id=1,
    )

    assert store.create_delivery(draft).success is True
    assert fake_supabase.writes() == [(DELIVERIES_TABLE, "insert")]


def test_create_delivery_requires_a_client(store, fake_supabase):
    draft = DeliveryDraft(
        order_number="7", courier_id=3, payment_method=PaymentMethod.CASH, order_total=30.0, fee_amount=5.0
    )

    result = store.create_delivery(draft)

    assert result.success is False
    assert result.error == "Selecione um cliente para a entrega."
    assert fake_supabase.calls == []


def test_failed_delivery_insert_removes_the_inline_client(store, fake_supabase):
    _seed_basic(fake_supabase)
    fake_supabase.failures[(DELIVERIES_TABLE, "insert")] = FakeAuthError("insert or update violates foreign key")
    draft = DeliveryDraft(
        order_number="1",
        courier_id=99,
        payment_method=PaymentMethod.PIX,
        order_total=10.0,
        fee_amount=2.0,
        new_client=ClientData(full_name="Ana", street_and_number="Rua A, 1", neighborhood="Centro"),
    )

    result = store.create_delivery(draft)

    assert result.success is False
    assert result.error == "insert or update violates foreign key"
    assert [row["nome_completo"] for row in fake_supabase.rows(CLIENTS_TABLE)] == ["Joana"]


def test_failed_delivery_insert_keeps_client_without_compensation(fake_supabase):
    store = DomainDataStore(lambda: fake_supabase, compensate_partial_writes=False)
    fake_supabase.failures[(DELIVERIES_TABLE, "insert")] = FakeAuthError("boom")
    draft = DeliveryDraft(
        order_number="1",
        courier_id=3,
        payment_method=PaymentMethod.PIX,
        order_total=10.0,
        fee_amount=2.0,
        new_client=ClientData(full_name="Ana", street_and_number="Rua A, 1", neighborhood="Centro"),
    )

    assert store.create_delivery(draft).success is False
    assert [row["nome_completo"] for row in fake_supabase.rows(CLIENTS_TABLE)] == ["Ana"]


def test_status_flow_records_departure_delivery_and_duration(store, fake_supabase):
    _seed_basic(fake_supabase)
    fake_supabase.seed(DELIVERIES_TABLE, delivery_row(1, courier_id=3, client_id=1))
    store.fetch_all()
    departed = datetime(2024, 5, 10, 19, 10, tzinfo=timezone.utc)

    assert store.update_delivery_status(1, DeliveryStatus.EN_ROUTE, departed).success is True
    assert store.get_delivery(1).departure_timestamp == departed

    delivered = departed + timedelta(seconds=125)
    assert store.update_delivery_status(1, DeliveryStatus.DELIVERED, delivered).success is True

    delivery = store.get_delivery(1)
    assert delivery.status is DeliveryStatus.DELIVERED
    assert delivery.delivery_timestamp == delivered
    assert delivery.delivery_duration_seconds == 125


def test_duration_is_not_recomputed_on_repeated_delivery(store, fake_supabase):
    _seed_basic(fake_supabase)
    fake_supabase.seed(
        DELIVERIES_TABLE,
        delivery_row(
            1,
            courier_id=3,
            client_id=1,
            status="Entregue",
            data_hora_saida="2024-05-10T19:10:00+00:00",
            data_hora_entrega="2024-05-10T19:12:05+00:00",
            duracao_entrega_segundos=125,
        ),
    )
    store.fetch_all()

    later = datetime(2024, 5, 10, 21, 0, tzinfo=timezone.utc)
    assert store.update_delivery_status(1, "Entregue", later).success is True

    [row] = fake_supabase.rows(DELIVERIES_TABLE)
    assert row["duracao_entrega_segundos"] == 125
    assert row["data_hora_entrega"] == "2024-05-10T19:12:05+00:00"


def test_delivered_without_departure_has_no_duration(store, fake_supabase):
    _seed_basic(fake_supabase)
    fake_supabase.seed(DELIVERIES_TABLE, delivery_row(1, courier_id=3, client_id=1))
    store.fetch_all()

    store.update_delivery_status(1, DeliveryStatus.DELIVERED)

    delivery = store.get_delivery(1)
    assert delivery.delivery_timestamp is not None
    assert delivery.delivery_duration_seconds is None


def test_strict_transitions_reject_skipping_en_route(fake_supabase):
    store = DomainDataStore(lambda: fake_supabase, strict_status_transitions=True)
    _seed_basic(fake_supabase)
    fake_supabase.seed(DELIVERIES_TABLE, delivery_row(1, courier_id=3, client_id=1, status="Entregue"))
    store.fetch_all()

    result = store.update_delivery_status(1, DeliveryStatus.AWAITING)

    assert result.success is False
    assert "Entregue" in result.error
    assert fake_supabase.writes() == []


def test_update_delivery_saves_client_and_delivery(store, fake_supabase):
    _seed_basic(fake_supabase)
    fake_supabase.seed(DELIVERIES_TABLE, delivery_row(1, courier_id=3, client_id=1))
    store.fetch_all()
    current = store.get_delivery(1)

    edited = replace(
        current,
        fee_amount=9.5,
        courier_id=4,
        client=replace(current.client, neighborhood="Jardins"),
    )
    assert store.update_delivery(edited).success is True

    assert store.get_delivery(1).fee_amount == 9.5
    assert store.get_delivery(1).courier_name == "Carla"
    assert store.clients[0].neighborhood == "Jardins"


def test_delete_delivery(store, fake_supabase):
    _seed_basic(fake_supabase)
    fake_supabase.seed(DELIVERIES_TABLE, delivery_row(1, courier_id=3, client_id=1))
    store.fetch_all()

    assert store.delete_delivery(1).success is True
    assert store.deliveries == ()


def test_create_client_appears_after_reload(store, fake_supabase):
    data = ClientData(full_name="Marcos", street_and_number="Av. Brasil, 500", neighborhood="Vila Nova", phone="")

    assert store.create_client(data).success is True

    [client] = store.clients
    assert client.full_name == "Marcos"
    assert client.street_and_number == "Av. Brasil, 500"
    assert client.neighborhood == "Vila Nova"
    assert client.phone is None


def test_create_client_validates_before_writing(store, fake_supabase):
    result = store.create_client(ClientData(full_name=" ", street_and_number="Rua", neighborhood="Centro"))

    assert result.success is False
    assert fake_supabase.calls == []


def test_update_and_delete_client(store, fake_supabase):
    fake_supabase.seed(CLIENTS_TABLE, client_row(1, "Joana"))

    updated = ClientData(full_name="Joana Lima", street_and_number="Rua 2, 20", neighborhood="Centro", phone="11999")
    assert store.update_client(1, updated).success is True
    assert store.clients[0].full_name == "Joana Lima"
    assert store.clients[0].phone == "11999"

    assert store.delete_client(1).success is True
    assert store.clients == ()


def test_create_courier_writes_nothing(store, fake_supabase):
    assert store.create_courier("Novo", "novo@example.com").success is True
    assert fake_supabase.calls == []


def test_update_courier_changes_only_the_name(store, fake_supabase):
    _seed_basic(fake_supabase)

    assert store.update_courier(3, "Bruno Souza", "ignored@example.com").success is True

    row = next(r for r in fake_supabase.rows(COURIERS_TABLE) if r["id"] == 3)
    assert row == {"id": 3, "nome_completo": "Bruno Souza", "usuario_id": "courier-uuid", "ativo": True}


def test_delete_courier_with_pending_delivery_is_refused(store, fake_supabase):
    _seed_basic(fake_supabase)
    fake_supabase.seed(DELIVERIES_TABLE, delivery_row(1, courier_id=3, client_id=1, status="Em Rota"))

    result = store.delete_courier(3)

    assert result.success is False
    assert result.error == PENDING_DELIVERIES_MESSAGE
    assert (COURIERS_TABLE, "update") not in fake_supabase.calls
    assert all(row["ativo"] for row in fake_supabase.rows(COURIERS_TABLE))


def test_delete_courier_deactivates_when_nothing_is_pending(store, fake_supabase):
    _seed_basic(fake_supabase)
    fake_supabase.seed(
        DELIVERIES_TABLE,
        delivery_row(1, courier_id=3, client_id=1, status="Entregue"),
        delivery_row(2, courier_id=3, client_id=1, status="Cancelado"),
    )

    assert store.delete_courier(3).success is True

    row = next(r for r in fake_supabase.rows(COURIERS_TABLE) if r["id"] == 3)
    assert row["ativo"] is False
    assert [c.id for c in store.couriers] == [4]
    # Historical deliveries keep their courier.
    assert {d.courier_id for d in store.deliveries} == {3}


def test_deliveries_for_identity(store, fake_supabase):
    _seed_basic(fake_supabase)
    fake_supabase.seed(
        DELIVERIES_TABLE,
        delivery_row(1, courier_id=3, client_id=1),
        delivery_row(2, courier_id=4, client_id=1),
    )
    store.fetch_all()

    assert [d.id for d in store.deliveries_for_identity("courier-uuid")] == [1]
    assert store.deliveries_for_identity("unknown") == ()
