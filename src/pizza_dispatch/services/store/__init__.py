"""Domain data store exports."""

from .data_store import PENDING_DELIVERIES_MESSAGE, DomainDataStore

__all__ = ["DomainDataStore", "PENDING_DELIVERIES_MESSAGE"]
