"""Delivery control backend for the Borda de Fogo pizzeria."""
