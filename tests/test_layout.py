"""Layout shell: role menus, header data, notifications, dashboards"""

from types import SimpleNamespace

from sqlalchemy.exc import OperationalError

from extensions import db
from modules.auth.roles import Role
from modules.layout.navigation import DEFAULT_MENU, MENUS, menu_for
from modules.notifications.models import Notification

from conftest import CHOICE_QUESTION, make_survey


def test_every_role_has_a_menu():
    assert set(MENUS) == set(Role)
    for role in Role:
        assert menu_for(role)
        assert menu_for(role.value) == MENUS[role]


def test_unknown_role_falls_back_to_default_menu():
    assert menu_for(None) == DEFAULT_MENU
    assert menu_for('ghost') == DEFAULT_MENU


def test_menu_endpoints_exist(app):
    endpoints = set(app.view_functions)
    for items in list(MENUS.values()) + [DEFAULT_MENU]:
        for item in items:
            assert item.endpoint in endpoints


def test_shell_for_student(app, student_client, student_user):
    with app.app_context():
        db.session.add(Notification(user_id=student_user.id, message='Welcome'))
        db.session.commit()

    data = student_client.get('/layout/').get_json()

    assert data['profile']['full_name'] == 'Stu Dent'
    assert [item['label'] for item in data['menu']] == ['Dashboard', 'Available Surveys', 'My Responses', 'Notifications']
    assert [n['message'] for n in data['notifications']] == ['Welcome']
    assert data['unread_count'] == 1


def test_shell_degrades_when_notifications_fail(app, student_client, monkeypatch):
    class BrokenQuery:
        def filter_by(self, **kwargs):
            raise OperationalError('SELECT', {}, Exception('database is down'))

    monkeypatch.setattr('modules.layout.routes.Notification', SimpleNamespace(query=BrokenQuery()))

    response = student_client.get('/layout/')

    assert response.status_code == 200
    data = response.get_json()
    assert data['notifications'] == []
    assert data['unread_count'] == 0
    assert data['profile'] is not None


def test_menu_endpoint(admin_client):
    data = admin_client.get('/layout/menu').get_json()

    assert data['role'] == 'admin'
    assert data['menu'][0]['url'].endswith('/dashboard/admin')


def test_notifications_mark_read(app, staff_client, staff_user):
    with app.app_context():
        first = Notification(user_id=staff_user.id, message='One')
        db.session.add_all([first, Notification(user_id=staff_user.id, message='Two')])
        db.session.commit()
        first_id = first.id

    response = staff_client.post(f'/notifications/{first_id}/read')
    assert response.get_json()['unread_count'] == 1

    unread = staff_client.get('/notifications/?unread=1').get_json()['notifications']
    assert [n['message'] for n in unread] == ['Two']

    assert staff_client.post('/notifications/read-all').get_json()['updated'] == 1


def test_cannot_read_someone_elses_notification(app, staff_client, student_user):
    with app.app_context():
        notification = Notification(user_id=student_user.id, message='Private')
        db.session.add(notification)
        db.session.commit()
        notification_id = notification.id

    assert staff_client.post(f'/notifications/{notification_id}/read').status_code == 404


def test_admin_dashboard(admin_client, staff_user, student_user):
    stats = admin_client.get('/dashboard/admin').get_json()['stats']

    assert stats['total_users'] == 3
    assert stats['active_users'] == 1
    assert stats['total_surveys'] == 0


def test_staff_dashboard(app, staff_client, staff_user):
    make_survey(app, staff_user, status='pending', questions=[CHOICE_QUESTION])
    make_survey(app, staff_user, title='CS101 Evaluation', status='draft')

    stats = staff_client.get('/dashboard/staff').get_json()['stats']

    assert stats['my_surveys'] == 2
    assert stats['pending_reviews'] == 1
    assert stats['total_responses'] == 0


def test_student_dashboard(app, student_client, staff_user):
    make_survey(app, staff_user, status='active', questions=[CHOICE_QUESTION])

    data = student_client.get('/dashboard/student').get_json()

    assert data['stats'] == {'available': 1, 'completed': 0}


def test_landing_is_public(client):
    data = client.get('/').get_json()

    assert data['identity'] is None
    assert data['login_url'] == '/auth/login'
