"""
Reports Module - Routes
Report document and its spreadsheet / CSV exports
"""

import csv
from io import StringIO

from flask import jsonify, current_app, Response

from modules.auth.session import get_session
from modules.reports.aggregation import build_report
from modules.reports import reports_bp
from modules.responses.models import SurveyResponse, SurveyAnswer
from modules.surveys.services import get_survey, ensure_can_view, visible_surveys_query
from utils.decorators import staff_required
from utils.excel_export import generate_report_excel


def _load(survey_id):
    """Survey the caller may report on, with its report document"""
    survey = get_survey(survey_id)
    ensure_can_view(get_session(), survey)

    questions = survey.get_questions_ordered()
    answers = SurveyAnswer.query.filter_by(survey_id=survey.id).all()
    document = build_report(
        survey, questions, answers,
        per_page=current_app.config.get('REPORT_QUESTIONS_PER_PAGE', 5)
    )
    return survey, questions, document


def _safe_filename(title):
    safe_name = "".join(c for c in title if c.isalnum() or c in (' ', '-', '_')).strip()
    return safe_name.replace(' ', '_')[:50] or 'survey'


def _display_value(question, value):
    if value is None:
        return ''
    labels = {opt['id']: opt['label'] for opt in (question.options or [])}
    if isinstance(value, list):
        return '; '.join(labels.get(v, str(v)) for v in value)
    if question.needs_options:
        return labels.get(value, str(value))
    return str(value)


@reports_bp.route('/<int:survey_id>')
@staff_required
def report(survey_id):
    """Report document: summary plus paginated question sections"""
    _, _, document = _load(survey_id)
    return jsonify({
        'success': True,
        'report': document
    })


@reports_bp.route('/<int:survey_id>/export.xlsx')
@staff_required
def export_xlsx(survey_id):
    """Report document as a spreadsheet"""
    survey, _, document = _load(survey_id)
    excel_buffer = generate_report_excel(document)

    filename = f'report_{survey.id}_{_safe_filename(survey.title)}.xlsx'
    return Response(
        excel_buffer.getvalue(),
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        headers={
            'Content-Disposition': f'attachment; filename="{filename}"'
        }
    )


@reports_bp.route('/<int:survey_id>/export.csv')
@staff_required
def export_csv(survey_id):
    """Raw answers, one row per response"""
    survey, questions, _ = _load(survey_id)
    responses = survey.responses.order_by(SurveyResponse.submitted_at.asc(), SurveyResponse.id.asc()).all()

    output = StringIO()
    writer = csv.writer(output)

    header = ['Submitted', 'Respondent']
    for q in questions:
        header.append(q.question_text[:50])
    writer.writerow(header)

    for response in responses:
        if survey.is_anonymous or response.user is None:
            respondent = 'Anonymous'
        else:
            respondent = response.user.full_name

        row = [response.submitted_at.strftime('%Y-%m-%d %H:%M'), respondent]

        answers_map = {a.question_id: a.value for a in response.answers}
        for q in questions:
            row.append(_display_value(q, answers_map.get(q.id)))

        writer.writerow(row)

    output.seek(0)
    return Response(
        output.getvalue(),
        mimetype='text/csv',
        headers={
            'Content-Disposition': f'attachment; filename=survey_{survey.id}_responses.csv'
        }
    )


@reports_bp.route('/')
@staff_required
def reports_index():
    """Surveys the caller can report on, with their response counts"""
    surveys = visible_surveys_query(get_session()).all()
    items = []
    for survey in surveys:
        data = survey.to_dict()
        data['responses_count'] = survey.responses_count
        items.append(data)

    return jsonify({
        'success': True,
        'surveys': items
    })
