"""Tariff naming and reference ids shown after an award."""

from __future__ import annotations

from datetime import datetime


def build_tariff_reference(prefix: str, tariff_id: int, created_at: datetime) -> str:
    """Human-readable reference, e.g. ``TRF-202610-000042``."""
    return f"{prefix}-{created_at:%Y%m}-{tariff_id:06d}"


def build_tariff_name(event_title: str | None, carrier_id: int, created_at: datetime) -> str:
    title = (event_title or "").strip() or "CSP"
    return f"{title} - carrier {carrier_id} - {created_at:%b %Y}"
