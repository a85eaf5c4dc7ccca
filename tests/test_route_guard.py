"""Route guard decision table and its Flask decorator"""

import itertools

import pytest

from modules.auth.roles import Role
from modules.auth.session import SessionIdentity
from utils.decorators import role_required
from utils.route_guard import GuardDecision, decide

from conftest import login, make_user


IDENTITIES = {
    Role.ADMIN: SessionIdentity(1, 'Ada', 'admin@insighthub.edu', Role.ADMIN),
    Role.STAFF: SessionIdentity(2, 'Sam', 'staff@insighthub.edu', Role.STAFF),
    Role.STUDENT: SessionIdentity(3, 'Stu', 'student@insighthub.edu', Role.STUDENT),
}

ROLE_SETS = [
    frozenset(combo)
    for size in range(len(Role) + 1)
    for combo in itertools.combinations(Role, size)
]


def expected(loading, identity, role, required):
    if loading:
        return GuardDecision.INTERSTITIAL
    if identity is None:
        return GuardDecision.REDIRECT_LANDING
    if required and role not in required:
        return GuardDecision.REDIRECT_DEFAULT
    return GuardDecision.RENDER


def test_decision_table_over_every_input():
    for loading, role, required in itertools.product((True, False), [None] + list(Role), ROLE_SETS):
        identity = IDENTITIES.get(role)
        assert decide(loading, identity, role, required) is expected(loading, identity, role, required)


def test_loading_wins_over_everything():
    assert decide(True, None, None, {Role.ADMIN}) is GuardDecision.INTERSTITIAL
    assert decide(True, IDENTITIES[Role.ADMIN], Role.ADMIN, ()) is GuardDecision.INTERSTITIAL


def test_empty_role_set_means_any_signed_in_role():
    for role, identity in IDENTITIES.items():
        assert decide(False, identity, role, ()) is GuardDecision.RENDER
        assert decide(False, identity, role, None) is GuardDecision.RENDER


def test_decorator_rejects_unknown_roles():
    with pytest.raises(ValueError):
        role_required('superuser')


def test_decorator_exposes_required_roles():
    @role_required('admin', Role.STAFF)
    def view():
        return 'ok'

    assert view.required_roles == frozenset({Role.ADMIN, Role.STAFF})


def test_anonymous_request_redirects_to_landing_with_origin(client):
    response = client.get('/surveys/?q=campus')

    assert response.status_code == 302
    assert '/landing' in response.headers['Location']
    assert 'next=' in response.headers['Location']
    assert 'surveys' in response.headers['Location']


def test_wrong_role_redirects_to_default_view(student_client):
    response = student_client.get('/surveys/')

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/dashboard/')


def test_allowed_role_renders(staff_client):
    response = staff_client.get('/surveys/')

    assert response.status_code == 200
    assert response.get_json()['success'] is True


def test_dashboard_index_redirects_to_role_dashboard(app, student_client):
    response = student_client.get('/dashboard/')

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/dashboard/student')


def test_unknown_path_redirects_to_landing(client):
    response = client.get('/no/such/page')

    assert response.status_code == 302
    assert '/landing' in response.headers['Location']


def test_admin_routes_closed_to_staff(app, staff_client):
    response = staff_client.get('/admin/users')

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/dashboard/')
