"""Unit tests for the candidature transition table."""

import pytest

from recruitment.errors import PreconditionFailedError
from recruitment.models.enums import CandidatureStatus as S
from recruitment.services.candidature_state_machine import (
    NON_TERMINAL_STATUSES,
    CandidatureEvent as E,
    apply_transition,
    can_apply,
    initial_status,
    is_legal_step,
)

LEGAL = [
    (S.PENDING, E.ASSIGN_PSYCHOLOGUE, S.ASSIGNED),
    (S.ASSIGNED, E.ASSIGN_PSYCHOLOGUE, S.ASSIGNED),
    (S.IN_PROGRESS, E.ASSIGN_PSYCHOLOGUE, S.IN_PROGRESS),
    (S.EVALUATED, E.ASSIGN_PSYCHOLOGUE, S.EVALUATED),
    (S.PENDING, E.ASSIGN_TESTS, S.ASSIGNED),
    (S.ASSIGNED, E.ASSIGN_TESTS, S.ASSIGNED),
    (S.ASSIGNED, E.START, S.IN_PROGRESS),
    (S.IN_PROGRESS, E.COMPLETE, S.COMPLETED),
    (S.COMPLETED, E.START_REVIEW, S.IN_REVIEW),
    (S.COMPLETED, E.DECIDE, S.EVALUATED),
    (S.IN_REVIEW, E.DECIDE, S.EVALUATED),
    (S.EVALUATED, E.ARCHIVE, S.ARCHIVED),
]


@pytest.mark.unit
@pytest.mark.parametrize("current,event,expected", LEGAL)
def test_legal_transitions(current, event, expected):
    assert apply_transition(current, event) == expected
    assert can_apply(current, event)


ILLEGAL = [
    (S.ARCHIVED, E.ASSIGN_PSYCHOLOGUE),
    (S.IN_PROGRESS, E.ASSIGN_TESTS),
    (S.EVALUATED, E.ASSIGN_TESTS),
    (S.PENDING, E.START),
    (S.ASSIGNED, E.COMPLETE),
    (S.IN_REVIEW, E.START_REVIEW),
    (S.PENDING, E.DECIDE),
    (S.IN_PROGRESS, E.DECIDE),
    (S.IN_REVIEW, E.ARCHIVE),
    (S.ARCHIVED, E.ARCHIVE),
]


@pytest.mark.unit
@pytest.mark.parametrize("current,event", ILLEGAL)
def test_illegal_transitions_raise_precondition_failed(current, event):
    assert not can_apply(current, event)
    with pytest.raises(PreconditionFailedError) as exc_info:
        apply_transition(current, event)
    assert exc_info.value.status_code == 400
    assert exc_info.value.current_status == current.value


@pytest.mark.unit
def test_archived_is_the_only_terminal_status():
    assert S.ARCHIVED not in NON_TERMINAL_STATUSES
    for status in S:
        if status != S.ARCHIVED:
            assert status in NON_TERMINAL_STATUSES
    for event in E:
        if event != E.CREATE:
            assert not can_apply(S.ARCHIVED, event)


@pytest.mark.unit
def test_initial_status():
    assert initial_status(with_psychologue=False) == S.PENDING
    assert initial_status(with_psychologue=True) == S.ASSIGNED


@pytest.mark.unit
def test_is_legal_step_matches_the_graph():
    assert is_legal_step(None, S.PENDING)
    assert not is_legal_step(None, S.ASSIGNED)
    assert is_legal_step(S.PENDING, S.ASSIGNED)
    assert is_legal_step(S.IN_REVIEW, S.EVALUATED)
    assert not is_legal_step(S.PENDING, S.EVALUATED)
    assert not is_legal_step(S.ARCHIVED, S.PENDING)
    assert not is_legal_step(S.ASSIGNED, S.ASSIGNED)


@pytest.mark.unit
def test_error_payload_names_required_statuses():
    with pytest.raises(PreconditionFailedError) as exc_info:
        apply_transition(S.PENDING, E.ARCHIVE)
    error = exc_info.value.payload["error"]
    assert error["code"] == "precondition_failed"
    assert error["details"]["required_statuses"] == ["evaluated"]
