"""Survey CRUD: save policy, visibility, cascade delete, status actions"""

from extensions import db
from modules.notifications.models import Notification
from modules.responses.models import SurveyResponse, SurveyAnswer
from modules.surveys.models import Survey, Question

from conftest import CHOICE_QUESTION, RATING_QUESTION, make_survey, question_ids


def survey_payload(**overrides):
    payload = {
        'title': 'Campus Facilities Feedback',
        'description': 'How do you use the campus?',
        'status': 'active',
        'is_anonymous': False,
        'questions': [
            {
                'question_text': 'Which building do you use most?',
                'question_type': 'multiple_choice',
                'is_required': True,
                'options': ['Library', 'Lab'],
            },
            {'question_text': 'Rate the cafeteria', 'question_type': 'rating_scale'},
        ],
    }
    payload.update(overrides)
    return payload


def test_staff_save_becomes_pending(app, staff_client, admin_user):
    response = staff_client.post('/surveys/', json=survey_payload(status='active'))

    assert response.status_code == 201
    survey = response.get_json()['survey']
    assert survey['status'] == 'pending'
    assert [q['order_index'] for q in survey['questions']] == [0, 1]

    with app.app_context():
        notified = Notification.query.filter_by(user_id=admin_user.id).all()
        assert len(notified) == 1
        assert 'approval' in notified[0].message


def test_staff_draft_request_also_pending(staff_client):
    response = staff_client.post('/surveys/', json=survey_payload(status='draft'))

    assert response.get_json()['survey']['status'] == 'pending'


def test_admin_keeps_requested_status(app, admin_client, student_user):
    response = admin_client.post('/surveys/', json=survey_payload(status='active'))

    assert response.status_code == 201
    assert response.get_json()['survey']['status'] == 'active'

    with app.app_context():
        assert Notification.query.filter_by(user_id=student_user.id).count() == 1


def test_admin_default_status_is_draft(admin_client):
    payload = survey_payload()
    del payload['status']

    response = admin_client.post('/surveys/', json=payload)

    assert response.get_json()['survey']['status'] == 'draft'


def test_admin_edit_without_status_keeps_pending(app, admin_client, staff_user):
    survey_id = make_survey(app, staff_user, status='pending', questions=[RATING_QUESTION])
    payload = survey_payload()
    del payload['status']

    response = admin_client.put(f'/surveys/{survey_id}', json=payload)

    assert response.status_code == 200
    assert response.get_json()['survey']['status'] == 'pending'
    with app.app_context():
        assert Notification.query.filter_by(user_id=staff_user.id).count() == 0


def test_publishing_without_questions_rejected(app, admin_client):
    response = admin_client.post('/surveys/', json=survey_payload(questions=[]))

    assert response.status_code == 400
    with app.app_context():
        assert Survey.query.count() == 0


def test_draft_without_questions_allowed(admin_client):
    response = admin_client.post('/surveys/', json=survey_payload(status='draft', questions=[]))

    assert response.status_code == 201


def test_invalid_question_rejects_whole_save(app, admin_client):
    payload = survey_payload(questions=[{'question_text': 'Pick', 'question_type': 'dropdown', 'options': ['One']}])

    response = admin_client.post('/surveys/', json=payload)

    assert response.status_code == 400
    assert 'Question 1' in response.get_json()['error']
    with app.app_context():
        assert Survey.query.count() == 0


def test_missing_title_rejected(admin_client):
    response = admin_client.post('/surveys/', json=survey_payload(title=''))

    assert response.status_code == 400
    assert 'title' in response.get_json()['details']


def test_end_date_must_follow_start_date(admin_client):
    payload = survey_payload(start_date='2026-05-10T10:00', end_date='2026-05-01T10:00')

    response = admin_client.post('/surveys/', json=payload)

    assert response.status_code == 400


def test_list_shows_only_own_surveys_to_staff(app, staff_client, staff_user, other_staff_user):
    make_survey(app, staff_user, title='Campus Facilities Feedback')
    make_survey(app, other_staff_user, title='CS101 Evaluation')

    surveys = staff_client.get('/surveys/').get_json()['surveys']

    assert [s['title'] for s in surveys] == ['Campus Facilities Feedback']


def test_list_search_and_status_filters(app, admin_client, staff_user):
    make_survey(app, staff_user, title='Campus Facilities Feedback', status='active', questions=[CHOICE_QUESTION])
    make_survey(app, staff_user, title='CS101 Evaluation', status='draft')

    data = admin_client.get('/surveys/?q=campus').get_json()
    assert [s['title'] for s in data['surveys']] == ['Campus Facilities Feedback']
    assert data['total'] == 2

    data = admin_client.get('/surveys/?status=draft').get_json()
    assert [s['title'] for s in data['surveys']] == ['CS101 Evaluation']


def test_staff_cannot_open_foreign_survey(app, staff_client, other_staff_user):
    survey_id = make_survey(app, other_staff_user)

    assert staff_client.get(f'/surveys/{survey_id}').status_code == 403


def test_detail_includes_ordered_questions(app, admin_client, staff_user):
    survey_id = make_survey(app, staff_user, questions=[CHOICE_QUESTION, RATING_QUESTION])

    data = admin_client.get(f'/surveys/{survey_id}').get_json()['survey']

    assert [q['question_type'] for q in data['questions']] == ['multiple_choice', 'rating_scale']
    assert data['next_statuses'] == ['active', 'pending']


def test_update_replaces_questions(app, staff_client, staff_user):
    survey_id = make_survey(app, staff_user, status='draft', questions=[CHOICE_QUESTION, RATING_QUESTION])

    payload = survey_payload(
        title='Campus Facilities Feedback (v2)',
        questions=[{'question_text': 'Comments', 'question_type': 'textarea'}]
    )
    response = staff_client.put(f'/surveys/{survey_id}', json=payload)

    assert response.status_code == 200
    data = response.get_json()['survey']
    assert data['status'] == 'pending'
    assert [q['question_text'] for q in data['questions']] == ['Comments']
    with app.app_context():
        assert Question.query.filter_by(survey_id=survey_id).count() == 1


def test_active_survey_is_not_editable(app, admin_client, staff_user):
    survey_id = make_survey(app, staff_user, status='active', questions=[CHOICE_QUESTION])

    response = admin_client.put(f'/surveys/{survey_id}', json=survey_payload())

    assert response.status_code == 409


def test_staff_cannot_edit_foreign_survey(app, staff_client, other_staff_user):
    survey_id = make_survey(app, other_staff_user)

    assert staff_client.put(f'/surveys/{survey_id}', json=survey_payload()).status_code == 403


def _seed_answered_survey(app, owner, student):
    survey_id = make_survey(app, owner, status='active', questions=[CHOICE_QUESTION, RATING_QUESTION])
    with app.app_context():
        survey = db.session.get(Survey, survey_id)
        for choice in ('o1', 'o2'):
            response = SurveyResponse(survey=survey, user_id=student.id if choice == 'o1' else None)
            for question in survey.get_questions_ordered():
                value = choice if question.question_type == 'multiple_choice' else 4
                SurveyAnswer(response=response, survey=survey, question=question, value=value)
            db.session.add(response)
        db.session.commit()
    return survey_id


def test_delete_requires_confirmation(app, admin_client, staff_user, student_user):
    survey_id = _seed_answered_survey(app, staff_user, student_user)

    response = admin_client.delete(f'/surveys/{survey_id}')

    assert response.status_code == 400
    with app.app_context():
        assert db.session.get(Survey, survey_id) is not None


def test_delete_cascades_and_reports_counts(app, admin_client, staff_user, student_user):
    survey_id = _seed_answered_survey(app, staff_user, student_user)

    response = admin_client.delete(f'/surveys/{survey_id}', json={'confirm': True})

    assert response.status_code == 200
    assert response.get_json()['deleted'] == {'surveys': 1, 'questions': 2, 'responses': 2, 'answers': 4}
    with app.app_context():
        assert db.session.get(Survey, survey_id) is None
        assert Question.query.filter_by(survey_id=survey_id).count() == 0
        assert SurveyResponse.query.filter_by(survey_id=survey_id).count() == 0
        assert SurveyAnswer.query.filter_by(survey_id=survey_id).count() == 0


def test_delete_confirm_query_param(app, staff_client, staff_user):
    survey_id = make_survey(app, staff_user)

    response = staff_client.delete(f'/surveys/{survey_id}?confirm=1')

    assert response.status_code == 200


def test_staff_cannot_delete_foreign_survey(app, staff_client, other_staff_user):
    survey_id = make_survey(app, other_staff_user)

    response = staff_client.delete(f'/surveys/{survey_id}', json={'confirm': True})

    assert response.status_code == 403


def test_admin_approves_pending_survey(app, admin_client, staff_user):
    survey_id = make_survey(app, staff_user, status='pending', questions=[CHOICE_QUESTION])

    response = admin_client.post(f'/surveys/{survey_id}/status', json={'action': 'approve'})

    assert response.status_code == 200
    assert response.get_json()['survey']['status'] == 'active'
    with app.app_context():
        messages = [n.message for n in Notification.query.filter_by(user_id=staff_user.id)]
        assert any('approved' in m for m in messages)


def test_staff_publish_goes_to_review(app, staff_client, staff_user):
    survey_id = make_survey(app, staff_user, status='draft', questions=[CHOICE_QUESTION])

    response = staff_client.post(f'/surveys/{survey_id}/status', json={'action': 'publish'})

    assert response.get_json()['survey']['status'] == 'pending'


def test_staff_cannot_approve(app, staff_client, staff_user):
    survey_id = make_survey(app, staff_user, status='pending', questions=[CHOICE_QUESTION])

    response = staff_client.post(f'/surveys/{survey_id}/status', json={'action': 'approve'})

    assert response.status_code == 403


def test_empty_draft_cannot_be_published(app, admin_client, staff_user):
    survey_id = make_survey(app, staff_user, status='draft')

    response = admin_client.post(f'/surveys/{survey_id}/status', json={'action': 'publish'})

    assert response.status_code == 400
    with app.app_context():
        assert db.session.get(Survey, survey_id).status == 'draft'


def test_illegal_transition_conflicts(app, admin_client, staff_user):
    survey_id = make_survey(app, staff_user, status='archived', questions=[CHOICE_QUESTION])

    response = admin_client.post(f'/surveys/{survey_id}/status', json={'action': 'publish'})

    assert response.status_code == 409


def test_close_then_archive(app, admin_client, staff_user):
    survey_id = make_survey(app, staff_user, status='active', questions=[CHOICE_QUESTION])

    assert admin_client.post(f'/surveys/{survey_id}/status', json={'action': 'close'}).status_code == 200
    response = admin_client.post(f'/surveys/{survey_id}/status', json={'action': 'archive'})

    assert response.get_json()['survey']['status'] == 'archived'


def test_missing_survey_is_404(admin_client):
    response = admin_client.get('/surveys/999')

    assert response.status_code == 404
    assert response.get_json()['success'] is False
