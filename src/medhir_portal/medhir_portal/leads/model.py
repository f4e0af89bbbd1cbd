from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Mapping, Optional, Tuple, Union

LeadId = Hashable


def _lead_id(value: Any) -> Optional[LeadId]:
    # Falsy ids are missing. Unhashable ids (lists, objects) cannot be deduped and count as missing too.
    if not value or not isinstance(value, Hashable):
        return None
    return value


@dataclass(frozen=True)
class LeadRecord:
    """A sales pipeline lead; `data` keeps the original mapping untouched."""

    lead_id: Optional[LeadId]
    data: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "LeadRecord":
        return cls(lead_id=_lead_id(raw.get("leadId")), data=dict(raw))

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.data)


@dataclass(frozen=True)
class StageGroup:
    stage_id: str
    leads: Tuple[LeadRecord, ...] = ()


@dataclass(frozen=True)
class FlatLeads:
    leads: Tuple[LeadRecord, ...] = ()


@dataclass(frozen=True)
class GroupedLeads:
    groups: Tuple[StageGroup, ...] = ()


LeadInput = Union[FlatLeads, GroupedLeads]
