"""Diff a submitted list of booking details against the rows a booking owns."""

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Set

from campus_booking.schemas.booking import BookingDetailIn


@dataclass
class ReconciliationPlan:
    to_delete: Set[int] = field(default_factory=set)
    to_update: List[BookingDetailIn] = field(default_factory=list)
    to_insert: List[BookingDetailIn] = field(default_factory=list)

    @property
    def updated_ids(self) -> Set[int]:
        return {entry.id for entry in self.to_update}


def plan_reconciliation(existing_ids: Iterable[int], entries: Sequence[BookingDetailIn]) -> ReconciliationPlan:
    """
    Split ``entries`` into updates (carry an id) and inserts (no id), and
    mark every existing id that was not resubmitted for deletion.
    """
    incoming = {entry.id for entry in entries if entry.id is not None}
    plan = ReconciliationPlan(to_delete=set(existing_ids) - incoming)
    for entry in entries:
        if entry.id is not None:
            plan.to_update.append(entry)
        else:
            plan.to_insert.append(entry)
    return plan
