"""Domain models for profiles, couriers, clients and deliveries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Role(str, Enum):
    MANAGER = "gerente"
    COURIER = "entregador"


class PaymentMethod(str, Enum):
    CASH = "Dinheiro"
    PIX = "Pix"
    DEBIT_CARD = "Cartão de Débito"
    CREDIT_CARD = "Cartão de Crédito"


class DeliveryStatus(str, Enum):
    AWAITING = "Aguardando"
    EN_ROUTE = "Em Rota"
    DELIVERED = "Entregue"
    CANCELLED = "Cancelado"


PENDING_STATUSES: tuple[DeliveryStatus, ...] = (DeliveryStatus.AWAITING, DeliveryStatus.EN_ROUTE)


@dataclass(slots=True)
class Profile:
    """Role record attached to an authenticated identity."""

    id: str
    full_name: str
    role: Role


@dataclass(slots=True)
class Courier:
    id: int
    full_name: str
    linked_identity_id: Optional[str] = None
    active: bool = True
    email: str = ""


@dataclass(slots=True)
class Client:
    id: int
    full_name: str
    street_and_number: str
    neighborhood: str
    phone: Optional[str] = None


@dataclass(slots=True)
class ClientData:
    """Client fields supplied when creating or editing a client."""

    full_name: str
    street_and_number: str
    neighborhood: str
    phone: Optional[str] = None


@dataclass(slots=True)
class Delivery:
    """A single order, from creation until it is delivered or cancelled."""

    id: int
    order_number: str
    client_id: int
    courier_id: int
    payment_method: PaymentMethod
    order_total: float
    fee_amount: float
    status: DeliveryStatus
    order_timestamp: datetime
    client: Optional[Client] = None
    courier_name: str = ""
    departure_timestamp: Optional[datetime] = None
    delivery_timestamp: Optional[datetime] = None
    delivery_duration_seconds: Optional[int] = None


@dataclass(slots=True)
class DeliveryDraft:
    """Input for a new delivery, optionally registering its client inline."""

    order_number: str
    courier_id: int
    payment_method: PaymentMethod
    order_total: float
    fee_amount: float
    client_id: Optional[int] = None
    new_client: Optional[ClientData] = None


@dataclass(slots=True, frozen=True)
class Snapshot:
    """Point-in-time copy of the remote collections."""

    deliveries: tuple[Delivery, ...] = ()
    clients: tuple[Client, ...] = ()
    couriers: tuple[Courier, ...] = ()


@dataclass(slots=True)
class OperationResult:
    success: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "OperationResult":
        return cls(success=True)

    @classmethod
    def failed(cls, error: str) -> "OperationResult":
        return cls(success=False, error=error)


class LoginErrorKind(str, Enum):
    EMAIL_NOT_CONFIRMED = "email_nao_confirmado"
    INVALID_CREDENTIALS = "credenciais_invalidas"
    GENERIC = "erro_generico"


@dataclass(slots=True)
class LoginResult:
    success: bool
    message: Optional[str] = None
    error_kind: Optional[LoginErrorKind] = None


@dataclass(slots=True)
class AuthResult:
    success: bool
    message: str


@dataclass(slots=True)
class CurrentUser:
    """Unified view of the logged-in identity and its profile."""

    id: str
    email: str
    full_name: str
    role: Role

    @property
    def is_manager(self) -> bool:
        return self.role is Role.MANAGER

    @property
    def is_courier(self) -> bool:
        return self.role is Role.COURIER
