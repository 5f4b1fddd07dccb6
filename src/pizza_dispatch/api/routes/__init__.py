"""Route group exports."""

from . import auth, clients, couriers, deliveries, health, reports

__all__ = ["auth", "clients", "couriers", "deliveries", "health", "reports"]
