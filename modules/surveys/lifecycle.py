"""
Surveys Module - Lifecycle
Status state machine and the status policy applied on save.
"""

from modules.auth.roles import Role
from utils.exceptions import InvalidTransition, PermissionDenied, ValidationError


# Legal status edges
TRANSITIONS = {
    'draft': frozenset({'pending', 'active'}),
    'pending': frozenset({'active', 'closed', 'draft'}),
    'active': frozenset({'closed'}),
    'closed': frozenset({'archived'}),
    'archived': frozenset(),
}

# Actions exposed by the status endpoint -> requested target
ACTIONS = {
    'publish': 'active',
    'submit': 'pending',
    'approve': 'active',
    'reject': 'draft',
    'close': 'closed',
    'archive': 'archived',
}

# Statuses a survey may be created with
INITIAL_STATUSES = frozenset({'draft', 'pending', 'active'})

# Edges staff may take on their own surveys (after the pending override)
STAFF_EDGES = frozenset({('draft', 'pending'), ('active', 'closed')})


def can_transition(current, target):
    return target in TRANSITIONS.get(current, frozenset())


def effective_status(author_role, requested):
    """
    Status a save actually persists with

    Staff-authored saves always become 'pending'; other roles keep the
    requested status ('draft' when none was given). Callers pass the
    survey's current status as the request when an update names none.
    """
    if author_role is Role.STAFF:
        return 'pending'
    return requested or 'draft'


def resolve_target(action, actor_role):
    """
    Maps a status action to the status it lands on for this role

    Staff publishing or submitting both land on 'pending'.
    """
    if action not in ACTIONS:
        raise ValidationError(f'Unknown action: {action}')
    target = ACTIONS[action]
    if actor_role is Role.STAFF and action == 'publish':
        target = 'pending'
    return target


def check_transition(survey, target, actor_role, question_count):
    """
    Validates a status change at the mutation boundary

    Raises:
        PermissionDenied: role may not take this edge
        InvalidTransition: edge is not in the state machine
        ValidationError: survey without questions leaving draft
    """
    current = survey.status

    if actor_role is Role.STUDENT:
        raise PermissionDenied('Students cannot change survey status')

    if target == current:
        raise InvalidTransition(f'Survey is already {current}')

    if not can_transition(current, target):
        raise InvalidTransition(f'Cannot move a survey from {current} to {target}')

    if actor_role is Role.STAFF and (current, target) not in STAFF_EDGES:
        raise PermissionDenied(f'Staff cannot move a survey from {current} to {target}')

    if current == 'draft' and question_count == 0:
        raise ValidationError('A survey needs at least one question before it leaves draft')
