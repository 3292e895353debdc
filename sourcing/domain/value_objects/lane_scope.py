"""LaneScope value object — the lanes covered by a carrier's bid or award.

Every field is optional. Stored as a JSON document, so unknown keys coming from
the document-storage side are dropped on the way in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def _as_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    return tuple(str(v).strip() for v in value if v and str(v).strip())


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class LaneScope:
    mode: str | None = None
    origins: tuple[str, ...] = ()
    destinations: tuple[str, ...] = ()
    equipment: tuple[str, ...] = ()
    # Free text such as "500 loads/week"
    volume: str | None = None
    include_regions: tuple[str, ...] = ()
    exclude_regions: tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return not any((
            self.mode,
            self.origins,
            self.destinations,
            self.equipment,
            self.volume,
            self.include_regions,
            self.exclude_regions,
        ))

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> LaneScope | None:
        """Build from a stored JSON document.

        Accepts the single-value ``origin`` / ``destination`` keys written by
        older award forms, and the ``equipmentTypes`` / ``estimatedVolume``
        keys written by the lane-scope editor, alongside the canonical ones.
        """
        if not data:
            return None
        origins = _as_tuple(data.get("origins")) or _as_tuple(data.get("origin"))
        destinations = _as_tuple(data.get("destinations")) or _as_tuple(data.get("destination"))
        equipment = _as_tuple(data.get("equipment")) or _as_tuple(data.get("equipmentTypes"))
        volume = _as_text(data.get("volume")) or _as_text(data.get("estimatedVolume"))
        mode = data.get("mode") or None
        return cls(
            mode=mode.strip().lower() if isinstance(mode, str) and mode.strip() else None,
            origins=origins,
            destinations=destinations,
            equipment=equipment,
            volume=volume,
            include_regions=_as_tuple(data.get("include_regions")),
            exclude_regions=_as_tuple(data.get("exclude_regions")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode,
            "origins": list(self.origins),
            "destinations": list(self.destinations),
            "equipment": list(self.equipment),
            "volume": self.volume,
            "include_regions": list(self.include_regions),
            "exclude_regions": list(self.exclude_regions),
        }
