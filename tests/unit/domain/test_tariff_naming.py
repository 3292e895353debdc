"""Tests for tariff names and reference ids."""

from datetime import datetime, timezone

from sourcing.domain.policies.tariff_naming import build_tariff_name, build_tariff_reference

CREATED = datetime(2026, 3, 5, tzinfo=timezone.utc)


def test_reference_format():
    assert build_tariff_reference("TRF", 42, CREATED) == "TRF-202603-000042"


def test_reference_keeps_large_ids():
    assert build_tariff_reference("CSP", 1234567, CREATED) == "CSP-202603-1234567"


def test_name_uses_event_title():
    assert build_tariff_name("Q3 LTL Bid", 101, CREATED) == "Q3 LTL Bid - carrier 101 - Mar 2026"


def test_name_without_title():
    assert build_tariff_name("   ", 101, CREATED) == "CSP - carrier 101 - Mar 2026"
