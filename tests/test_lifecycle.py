"""Survey status state machine"""

from types import SimpleNamespace

import pytest

from modules.auth.roles import Role
from modules.surveys.lifecycle import (
    TRANSITIONS, can_transition, check_transition, effective_status, resolve_target
)
from utils.exceptions import InvalidTransition, PermissionDenied, ValidationError


def survey(status):
    return SimpleNamespace(status=status)


def test_transition_table():
    assert can_transition('draft', 'active')
    assert can_transition('pending', 'draft')
    assert can_transition('closed', 'archived')
    assert not can_transition('archived', 'active')
    assert not can_transition('active', 'draft')
    assert TRANSITIONS['archived'] == frozenset()


def test_staff_saves_always_pending():
    assert effective_status(Role.STAFF, 'active') == 'pending'
    assert effective_status(Role.STAFF, 'draft') == 'pending'
    assert effective_status(Role.STAFF, None) == 'pending'


def test_admin_keeps_requested_status():
    assert effective_status(Role.ADMIN, 'active') == 'active'
    assert effective_status(Role.ADMIN, None) == 'draft'


def test_staff_publish_lands_on_pending():
    assert resolve_target('publish', Role.STAFF) == 'pending'
    assert resolve_target('publish', Role.ADMIN) == 'active'


def test_unknown_action():
    with pytest.raises(ValidationError):
        resolve_target('explode', Role.ADMIN)


def test_leaving_draft_needs_questions():
    with pytest.raises(ValidationError):
        check_transition(survey('draft'), 'active', Role.ADMIN, question_count=0)

    check_transition(survey('draft'), 'active', Role.ADMIN, question_count=1)


def test_illegal_edges_rejected():
    with pytest.raises(InvalidTransition):
        check_transition(survey('archived'), 'active', Role.ADMIN, 3)
    with pytest.raises(InvalidTransition):
        check_transition(survey('active'), 'active', Role.ADMIN, 3)


def test_staff_limited_edges():
    check_transition(survey('draft'), 'pending', Role.STAFF, 1)
    check_transition(survey('active'), 'closed', Role.STAFF, 1)

    with pytest.raises(PermissionDenied):
        check_transition(survey('pending'), 'active', Role.STAFF, 1)
    with pytest.raises(PermissionDenied):
        check_transition(survey('closed'), 'archived', Role.STAFF, 1)


def test_students_cannot_transition():
    with pytest.raises(PermissionDenied):
        check_transition(survey('draft'), 'pending', Role.STUDENT, 1)
