"""
The candidature lifecycle as data.

Every legal status change is one row of ``TRANSITIONS``. Services never
compare status strings themselves: they ask ``apply_transition`` for the
target status, which raises PreconditionFailedError for a guard violation.

    pending -> assigned -> in_progress -> completed -> in_review -> evaluated -> archived
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional

from recruitment.errors import PreconditionFailedError
from recruitment.models.enums import CandidatureStatus


class CandidatureEvent(str, Enum):
    CREATE = "create"
    ASSIGN_PSYCHOLOGUE = "assign_psychologue"
    ASSIGN_TESTS = "assign_tests"
    START = "start"
    COMPLETE = "complete"
    START_REVIEW = "start_review"
    DECIDE = "decide"
    ARCHIVE = "archive"


TERMINAL_STATUSES: FrozenSet[CandidatureStatus] = frozenset({CandidatureStatus.ARCHIVED})

NON_TERMINAL_STATUSES: FrozenSet[CandidatureStatus] = frozenset(
    status for status in CandidatureStatus if status not in TERMINAL_STATUSES
)


@dataclass(frozen=True)
class TransitionRule:
    """
    Guard and effect of one event.

    ``allowed_from`` is the guard. The candidature moves to ``target`` when
    its current status is in ``moves_from`` (every allowed status when
    None); from any other allowed status the event leaves status unchanged.
    """

    allowed_from: FrozenSet[CandidatureStatus]
    target: CandidatureStatus
    moves_from: Optional[FrozenSet[CandidatureStatus]] = None
    action: str = ""

    def target_for(self, current: CandidatureStatus) -> CandidatureStatus:
        if self.moves_from is None or current in self.moves_from:
            return self.target
        return current


TRANSITIONS: dict[CandidatureEvent, TransitionRule] = {
    CandidatureEvent.CREATE: TransitionRule(
        allowed_from=frozenset(),
        target=CandidatureStatus.PENDING,
        action="create candidature",
    ),
    CandidatureEvent.ASSIGN_PSYCHOLOGUE: TransitionRule(
        allowed_from=NON_TERMINAL_STATUSES,
        target=CandidatureStatus.ASSIGNED,
        moves_from=frozenset({CandidatureStatus.PENDING}),
        action="assign psychologue",
    ),
    CandidatureEvent.ASSIGN_TESTS: TransitionRule(
        allowed_from=frozenset({CandidatureStatus.PENDING, CandidatureStatus.ASSIGNED}),
        target=CandidatureStatus.ASSIGNED,
        action="assign tests",
    ),
    CandidatureEvent.START: TransitionRule(
        allowed_from=frozenset({CandidatureStatus.ASSIGNED}),
        target=CandidatureStatus.IN_PROGRESS,
        action="start evaluation",
    ),
    CandidatureEvent.COMPLETE: TransitionRule(
        allowed_from=frozenset({CandidatureStatus.IN_PROGRESS}),
        target=CandidatureStatus.COMPLETED,
        action="complete evaluation",
    ),
    CandidatureEvent.START_REVIEW: TransitionRule(
        allowed_from=frozenset({CandidatureStatus.COMPLETED}),
        target=CandidatureStatus.IN_REVIEW,
        action="start review",
    ),
    CandidatureEvent.DECIDE: TransitionRule(
        allowed_from=frozenset({CandidatureStatus.COMPLETED, CandidatureStatus.IN_REVIEW}),
        target=CandidatureStatus.EVALUATED,
        action="make decision",
    ),
    CandidatureEvent.ARCHIVE: TransitionRule(
        allowed_from=frozenset({CandidatureStatus.EVALUATED}),
        target=CandidatureStatus.ARCHIVED,
        action="archive",
    ),
}


def initial_status(with_psychologue: bool) -> CandidatureStatus:
    """Status of a freshly created candidature."""
    if with_psychologue:
        return TRANSITIONS[CandidatureEvent.ASSIGN_PSYCHOLOGUE].target_for(CandidatureStatus.PENDING)
    return TRANSITIONS[CandidatureEvent.CREATE].target


def apply_transition(current: CandidatureStatus, event: CandidatureEvent) -> CandidatureStatus:
    """
    Target status of ``event`` from ``current``.

    Raises PreconditionFailedError when the event is not allowed from the
    current status. Returning ``current`` means the event is legal but does
    not change status (and so needs no transition log entry).
    """
    rule = TRANSITIONS[event]
    current = CandidatureStatus(current)
    if current not in rule.allowed_from:
        raise PreconditionFailedError(current, rule.allowed_from, rule.action)
    return rule.target_for(current)


def can_apply(current: CandidatureStatus, event: CandidatureEvent) -> bool:
    return CandidatureStatus(current) in TRANSITIONS[event].allowed_from


def is_legal_step(from_status: Optional[CandidatureStatus], to_status: CandidatureStatus) -> bool:
    """Whether some event moves ``from_status`` to ``to_status`` (None = creation)."""
    if from_status is None:
        return to_status == TRANSITIONS[CandidatureEvent.CREATE].target
    if from_status == to_status:
        return False
    return any(
        from_status in rule.allowed_from and rule.target_for(from_status) == to_status
        for rule in TRANSITIONS.values()
    )
