"""
Shared fixtures: application on an in-memory database, one user per role
and test clients signed in as each of them.

Requests run in their own application context, so fixtures hand out plain
references (ids, emails) instead of ORM instances bound to a session.
"""

from collections import namedtuple

import pytest

from app import create_app
from extensions import db
from modules.auth.models import User, Department
from modules.surveys.models import Survey, Question


PASSWORD = 'correct-horse-42'

UserRef = namedtuple('UserRef', ['id', 'email', 'role'])


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


def make_user(app, email, role, full_name=None, is_active=True, department_id=None):
    with app.app_context():
        user = User(
            email=email,
            full_name=full_name or email.split('@')[0].title(),
            role=role,
            is_active=is_active,
            department_id=department_id,
        )
        user.set_password(PASSWORD)
        db.session.add(user)
        db.session.commit()
        return UserRef(user.id, user.email, user.role)


def make_survey(app, owner, title='Campus Facilities Feedback', status='draft', questions=None,
                description=None, is_anonymous=False):
    """Survey with the given question dicts, written straight to the database; returns its id"""
    with app.app_context():
        survey = Survey(
            title=title,
            description=description,
            status=status,
            created_by=owner.id,
            is_anonymous=is_anonymous,
        )
        for index, data in enumerate(questions or []):
            survey.questions.append(Question(order_index=index, **data))
        db.session.add(survey)
        db.session.commit()
        return survey.id


def question_ids(app, survey_id):
    with app.app_context():
        survey = db.session.get(Survey, survey_id)
        return [q.id for q in survey.get_questions_ordered()]


def login(client, email, password=PASSWORD):
    return client.post('/auth/login', json={'email': email, 'password': password})


@pytest.fixture
def department_id(app):
    with app.app_context():
        department = Department(name='Computer Science')
        db.session.add(department)
        db.session.commit()
        return department.id


@pytest.fixture
def admin_user(app):
    return make_user(app, 'admin@insighthub.edu', 'admin', 'Ada Admin')


@pytest.fixture
def staff_user(app):
    return make_user(app, 'staff@insighthub.edu', 'staff', 'Sam Staff')


@pytest.fixture
def other_staff_user(app):
    return make_user(app, 'staff2@insighthub.edu', 'staff', 'Olive Other')


@pytest.fixture
def student_user(app):
    return make_user(app, 'student@insighthub.edu', 'student', 'Stu Dent')


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app, admin_user):
    client = app.test_client()
    assert login(client, admin_user.email).status_code == 200
    return client


@pytest.fixture
def staff_client(app, staff_user):
    client = app.test_client()
    assert login(client, staff_user.email).status_code == 200
    return client


@pytest.fixture
def student_client(app, student_user):
    client = app.test_client()
    assert login(client, student_user.email).status_code == 200
    return client


CHOICE_QUESTION = {
    'question_text': 'Which building do you use most?',
    'question_type': 'multiple_choice',
    'is_required': True,
    'options': [{'id': 'o1', 'label': 'Library'}, {'id': 'o2', 'label': 'Lab'}],
}

RATING_QUESTION = {
    'question_text': 'Rate the cafeteria',
    'question_type': 'rating_scale',
    'is_required': False,
    'min_rating': 1,
    'max_rating': 5,
}

TEXT_QUESTION = {
    'question_text': 'Anything else?',
    'question_type': 'textarea',
    'is_required': False,
}
