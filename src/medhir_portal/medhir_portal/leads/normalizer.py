"""Flatten and dedupe lead collections for the sales views.

Leads arrive either as a flat list or grouped by pipeline stage
(`[{stageId, leads: [...]}, ...]`). Views always want one flat list with
each lead once.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Mapping

from .model import FlatLeads, GroupedLeads, LeadInput, LeadRecord, StageGroup


def _records(items: Any) -> Iterator[LeadRecord]:
    if not isinstance(items, list):
        return
    for item in items:
        if isinstance(item, Mapping):
            yield LeadRecord.from_mapping(item)


def _is_grouped(payload: List[Any]) -> bool:
    first = payload[0]
    return isinstance(first, Mapping) and bool(first.get("stageId")) and isinstance(first.get("leads"), list)


def lead_input_from_payload(payload: Any) -> LeadInput:
    """Decide the input variant once, at the JSON boundary.

    The first element decides: a truthy `stageId` plus a `leads` list means the
    whole payload is grouped. Any other list is flat; anything else is empty.
    """
    if not isinstance(payload, list) or not payload:
        return FlatLeads()

    if _is_grouped(payload):
        groups = []
        for group in payload:
            if not isinstance(group, Mapping):
                continue
            groups.append(StageGroup(stage_id=str(group.get("stageId") or ""), leads=tuple(_records(group.get("leads")))))
        return GroupedLeads(groups=tuple(groups))

    return FlatLeads(leads=tuple(_records(payload)))


def _flatten(lead_input: LeadInput) -> Iterable[LeadRecord]:
    if isinstance(lead_input, GroupedLeads):
        for group in lead_input.groups:
            yield from group.leads
    elif isinstance(lead_input, FlatLeads):
        yield from lead_input.leads


def normalize(lead_input: LeadInput) -> List[LeadRecord]:
    """First occurrence of each lead id wins; leads without an id are dropped."""
    seen = set()
    result: List[LeadRecord] = []
    for lead in _flatten(lead_input):
        if not lead.lead_id or lead.lead_id in seen:
            continue
        seen.add(lead.lead_id)
        result.append(lead)
    return result


def normalize_payload(payload: Any) -> List[Dict[str, Any]]:
    return [lead.to_dict() for lead in normalize(lead_input_from_payload(payload))]
