"""
Per-monitor opportunity store.
"""

import dataclasses
from typing import Dict, Iterable, List, Optional

from arbwatch.models import Opportunity, OpportunityKind, OpportunityStatus


class OpportunityStore:
    """
    Append-only, deduplicated collection of opportunities for one monitor.

    Insertion order is detection order. An id is stored at most once and
    the first-seen entry wins, so detected_at and status are never
    overwritten by a later poll. Reads hand out shallow copies; payloads
    are frozen, so the only way to change a stored entry is mark_executed().
    """

    def __init__(self, kind: OpportunityKind):
        self.kind = kind
        self._items: Dict[str, Opportunity] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, opportunity_id: str) -> bool:
        return opportunity_id in self._items

    def add_new(self, candidates: Iterable[Opportunity]) -> List[Opportunity]:
        """Insert unseen candidates and return copies of the ones added."""
        added = []
        for opportunity in candidates:
            if opportunity.opportunity_id in self._items:
                continue
            self._items[opportunity.opportunity_id] = opportunity
            added.append(dataclasses.replace(opportunity))
        return added

    def get(self, opportunity_id: str) -> Optional[Opportunity]:
        opportunity = self._items.get(opportunity_id)
        return dataclasses.replace(opportunity) if opportunity else None

    def snapshot(self) -> List[Opportunity]:
        return [dataclasses.replace(o) for o in self._items.values()]

    def mark_executed(self, opportunity_id: str) -> bool:
        """
        Flip a pending opportunity to executed.

        Returns False if the id is unknown or already executed.
        """
        opportunity = self._items.get(opportunity_id)
        if opportunity is None or opportunity.status == OpportunityStatus.EXECUTED:
            return False
        opportunity.status = OpportunityStatus.EXECUTED
        return True

    def count_by_status(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in OpportunityStatus}
        for opportunity in self._items.values():
            counts[opportunity.status.value] += 1
        return counts
