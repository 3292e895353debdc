"""Port interface for tariff family and tariff persistence."""

from abc import ABC, abstractmethod

from sourcing.domain.entities.tariff import Tariff, TariffFamily
from sourcing.domain.value_objects.enums import OwnershipType


class TariffRepository(ABC):
    @abstractmethod
    async def find_or_create_family(
        self, customer_id: int, carrier_id: int, ownership_type: OwnershipType
    ) -> TariffFamily:
        """Return the family for the triple, creating it on first use.

        Must be safe against a concurrent creator (insert-on-conflict).
        """
        ...

    @abstractmethod
    async def create_tariff(self, tariff: Tariff) -> Tariff:
        ...

    @abstractmethod
    async def set_reference_id(self, tariff_id: int, reference_id: str) -> None:
        ...

    @abstractmethod
    async def get_tariff(self, tariff_id: int) -> Tariff | None:
        ...
