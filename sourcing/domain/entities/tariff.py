"""Tariff family and tariff entities."""

from dataclasses import dataclass, field
from datetime import date

from sourcing.domain.value_objects.enums import OwnershipType, TariffStatus


@dataclass
class TariffFamily:
    id: int | None
    customer_id: int
    carrier_id: int
    ownership_type: OwnershipType = OwnershipType.PRIMARY


@dataclass
class Tariff:
    id: int | None
    family_id: int
    carrier_id: int
    csp_event_id: int
    source_assignment_id: int | None
    name: str
    status: TariffStatus = TariffStatus.PROPOSED
    customer_ids: list[int] = field(default_factory=list)
    mode: str | None = None
    proposed_effective_date: date | None = None
    proposed_expiry_date: date | None = None
    tariff_reference_id: str | None = None
