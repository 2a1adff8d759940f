"""Totals and summary message package."""

from boutique_bill.totals.calculator import (
    build_summary_message,
    compute_balance,
    compute_total,
    compute_totals,
    format_long_date,
    format_measurements,
    format_measurement_value,
    format_money,
    visible_measurements,
)

__all__ = [
    "build_summary_message",
    "compute_balance",
    "compute_total",
    "compute_totals",
    "format_long_date",
    "format_measurements",
    "format_measurement_value",
    "format_money",
    "visible_measurements",
]
