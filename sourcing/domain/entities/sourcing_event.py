"""SourcingEvent entity — a carrier bidding campaign for one customer."""

from dataclasses import dataclass

from sourcing.domain.value_objects.enums import EventStage


@dataclass
class SourcingEvent:
    id: int
    customer_id: int
    stage: EventStage
    title: str | None = None
    mode: str | None = None

    def is_in_award_stage(self) -> bool:
        return self.stage == EventStage.AWARD_TARIFF_FINALIZATION
