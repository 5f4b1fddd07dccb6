"""Delivery report service exports."""

from .export import export_deliveries_workbook
from .summary import build_delivery_report, filter_deliveries

__all__ = ["build_delivery_report", "filter_deliveries", "export_deliveries_workbook"]
