"""In-memory snapshot of deliveries, clients and couriers backed by Supabase.

Every mutation performs its remote write(s) and then reloads the whole
snapshot; nothing is patched in place. Public operations never raise: failures
come back as `OperationResult(success=False, error=...)`.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from supabase import Client as SupabaseClient

from ...config import settings
from ...db.supabase import (
    CLIENTS_TABLE,
    COURIERS_TABLE,
    DELIVERIES_TABLE,
    get_supabase_client,
)
from ...models.domain import (
    PENDING_STATUSES,
    Client,
    ClientData,
    Courier,
    Delivery,
    DeliveryDraft,
    DeliveryStatus,
    OperationResult,
    Snapshot,
)
from ...models.errors import (
    BusinessRuleViolation,
    DomainError,
    RemoteServiceError,
    ValidationError,
    describe_remote_error,
)
from ...persistence.mappers import (
    client_from_row,
    client_to_row,
    courier_from_row,
    delivery_from_row,
    delivery_update_row,
    new_delivery_row,
    parse_timestamp,
)
from ..compensation import compensate
from .transitions import ensure_transition_allowed, status_update_fields

logger = logging.getLogger(__name__)

DELIVERY_SELECT = (
    "*, "
    "clientes ( id, nome_completo, rua_numero, bairro, telefone ), "
    "entregadores ( id, nome_completo )"
)
COURIER_SELECT = "id, nome_completo, usuario_id, ativo"
PENDING_DELIVERIES_MESSAGE = "Não é possível remover este entregador pois há entregas pendentes."


def _inserted_id(response: Any) -> int:
    rows = response.data or []
    if not rows:
        raise RemoteServiceError("O servidor não retornou o registro criado.")
    return int(rows[0]["id"])


def _validate_client_data(data: ClientData) -> None:
    if not data.full_name.strip() or not data.street_and_number.strip() or not data.neighborhood.strip():
        raise ValidationError("Preencha nome, endereço e bairro do cliente.")


class DomainDataStore:
    """Client-side cache plus CRUD over the delivery collections."""

    def __init__(
        self,
        client_factory: Callable[[], Optional[SupabaseClient]] = get_supabase_client,
        *,
        strict_status_transitions: bool | None = None,
        compensate_partial_writes: bool | None = None,
    ) -> None:
        self._client_factory = client_factory
        self.strict_status_transitions = (
            settings.strict_status_transitions if strict_status_transitions is None else strict_status_transitions
        )
        self.compensate_partial_writes = (
            settings.compensate_partial_writes if compensate_partial_writes is None else compensate_partial_writes
        )
        self._snapshot = Snapshot()
        self.loading = False
        self.error: Optional[str] = None

    # -- snapshot access -------------------------------------------------

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def deliveries(self) -> tuple[Delivery, ...]:
        return self._snapshot.deliveries

    @property
    def clients(self) -> tuple[Client, ...]:
        return self._snapshot.clients

    @property
    def couriers(self) -> tuple[Courier, ...]:
        return self._snapshot.couriers

    def get_delivery(self, delivery_id: int) -> Optional[Delivery]:
        return next((d for d in self._snapshot.deliveries if d.id == delivery_id), None)

    def courier_for_identity(self, identity_id: str) -> Optional[Courier]:
        return next((c for c in self._snapshot.couriers if c.linked_identity_id == identity_id), None)

    def deliveries_for_identity(self, identity_id: str) -> tuple[Delivery, ...]:
        """Deliveries assigned to the courier linked to an auth identity."""
        courier = self.courier_for_identity(identity_id)
        if courier is None:
            return ()
        return tuple(d for d in self._snapshot.deliveries if d.courier_id == courier.id)

    # -- loading ---------------------------------------------------------

    def _client(self) -> SupabaseClient:
        client = self._client_factory()
        if client is None:
            raise RemoteServiceError("Banco de dados não configurado.")
        return client

    def fetch_all(self) -> bool:
        """Reload all three collections; keeps the previous snapshot on failure."""
        self.loading = True
        self.error = None
        try:
            client = self._client()

            delivery_rows = (
                client.table(DELIVERIES_TABLE)
                .select(DELIVERY_SELECT)
                .order("data_hora_pedido", desc=True)
                .execute()
            ).data or []
            client_rows = (
                client.table(CLIENTS_TABLE).select("*").order("nome_completo").execute()
            ).data or []
            courier_rows = (
                client.table(COURIERS_TABLE)
                .select(COURIER_SELECT)
                .eq("ativo", True)
                .order("nome_completo")
                .execute()
            ).data or []

            snapshot = Snapshot(
                deliveries=tuple(delivery_from_row(row) for row in delivery_rows),
                clients=tuple(client_from_row(row) for row in client_rows),
                couriers=tuple(courier_from_row(row) for row in courier_rows),
            )
        except Exception as exc:
            self.error = describe_remote_error(exc)
            logger.error(f"Error fetching data: {exc}")
            return False
        finally:
            self.loading = False

        self._snapshot = snapshot
        logger.debug(
            f"Loaded {len(snapshot.deliveries)} deliveries, {len(snapshot.clients)} clients, "
            f"{len(snapshot.couriers)} couriers"
        )
        return True

    def _mutate(self, description: str, operation: Callable[[], None]) -> OperationResult:
        try:
            operation()
        except DomainError as exc:
            logger.warning(f"Error {description}: {exc}")
            return OperationResult.failed(exc.message)
        except Exception as exc:
            logger.error(f"Error {description}: {exc}")
            return OperationResult.failed(describe_remote_error(exc))

        self.fetch_all()
        return OperationResult.ok()

    # -- deliveries ------------------------------------------------------

    def create_delivery(self, draft: DeliveryDraft) -> OperationResult:
        """Insert a delivery as Aguardando, registering its client first when `new_client` is set."""

        def operation() -> None:
            if draft.new_client is None and draft.client_id is None:
                raise ValidationError("Selecione um cliente para a entrega.")
            if draft.new_client is not None:
                _validate_client_data(draft.new_client)
            client = self._client()

            created_client_id: Optional[int] = None
            client_id = draft.client_id
            if draft.new_client is not None:
                response = client.table(CLIENTS_TABLE).insert(client_to_row(draft.new_client)).execute()
                created_client_id = _inserted_id(response)
                client_id = created_client_id

            row = new_delivery_row(draft, client_id, datetime.now(timezone.utc))
            try:
                client.table(DELIVERIES_TABLE).insert(row).execute()
            except Exception:
                if created_client_id is not None and self.compensate_partial_writes:
                    compensate(
                        f"client {created_client_id} created for order {draft.order_number!r}",
                        lambda: client.table(CLIENTS_TABLE).delete().eq("id", created_client_id).execute(),
                    )
                raise

        return self._mutate("creating delivery", operation)

    def update_delivery_status(
        self,
        delivery_id: int,
        status: DeliveryStatus | str,
        timestamp: Optional[datetime] = None,
    ) -> OperationResult:
        """Write a new status plus the timing columns it owns.

        The duration is computed against the departure time held in the
        current snapshot, so the snapshot must have been loaded after the
        delivery went out.
        """

        def operation() -> None:
            target = DeliveryStatus(status)
            moment = parse_timestamp(timestamp) or datetime.now(timezone.utc)
            current = self.get_delivery(delivery_id)
            if self.strict_status_transitions:
                ensure_transition_allowed(current, target)

            fields = status_update_fields(current, target, moment)
            self._client().table(DELIVERIES_TABLE).update(fields).eq("id", delivery_id).execute()

        return self._mutate("updating delivery status", operation)

    def update_delivery(self, edited: Delivery) -> OperationResult:
        def operation() -> None:
            client = self._client()
            if edited.client is not None:
                client.table(CLIENTS_TABLE).update(client_to_row(edited.client)).eq(
                    "id", edited.client.id
                ).execute()
            client.table(DELIVERIES_TABLE).update(delivery_update_row(edited)).eq("id", edited.id).execute()

        return self._mutate("updating delivery", operation)

    def delete_delivery(self, delivery_id: int) -> OperationResult:
        return self._mutate(
            "deleting delivery",
            lambda: self._client().table(DELIVERIES_TABLE).delete().eq("id", delivery_id).execute(),
        )

    # -- clients ---------------------------------------------------------

    def create_client(self, data: ClientData) -> OperationResult:
        def operation() -> None:
            _validate_client_data(data)
            self._client().table(CLIENTS_TABLE).insert(client_to_row(data)).execute()

        return self._mutate("creating client", operation)

    def update_client(self, client_id: int, data: ClientData) -> OperationResult:
        def operation() -> None:
            _validate_client_data(data)
            self._client().table(CLIENTS_TABLE).update(client_to_row(data)).eq("id", client_id).execute()

        return self._mutate("updating client", operation)

    def delete_client(self, client_id: int) -> OperationResult:
        return self._mutate(
            "deleting client",
            lambda: self._client().table(CLIENTS_TABLE).delete().eq("id", client_id).execute(),
        )

    # -- couriers --------------------------------------------------------

    def create_courier(self, name: str, email: str) -> OperationResult:
        """Placeholder: courier records are created by account registration."""
        logger.info(f"Courier {name!r} <{email}> must register an account; nothing written")
        return OperationResult.ok()

    def update_courier(self, courier_id: int, name: str, email: str) -> OperationResult:
        # The email lives in the auth service and is not editable from here.
        def operation() -> None:
            if not name.strip():
                raise ValidationError("Informe o nome do entregador.")
            self._client().table(COURIERS_TABLE).update({"nome_completo": name}).eq("id", courier_id).execute()

        return self._mutate("updating courier", operation)

    def delete_courier(self, courier_id: int) -> OperationResult:
        """Deactivate a courier unless it still has Aguardando/Em Rota deliveries."""

        def operation() -> None:
            client = self._client()
            pending = (
                client.table(DELIVERIES_TABLE)
                .select("id")
                .eq("entregador_id", courier_id)
                .in_("status", [status.value for status in PENDING_STATUSES])
                .execute()
            ).data or []
            if pending:
                raise BusinessRuleViolation(PENDING_DELIVERIES_MESSAGE)
            client.table(COURIERS_TABLE).update({"ativo": False}).eq("id", courier_id).execute()

        return self._mutate("deleting courier", operation)
