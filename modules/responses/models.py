"""
Responses Module - Models
Submitted responses and their per-question answers
"""

from datetime import datetime
from extensions import db


class SurveyResponse(db.Model):
    """
    One respondent's submission of a survey
    user_id is NULL for anonymous surveys
    """
    __tablename__ = 'survey_responses'
    __table_args__ = (
        # NULL user_id rows (anonymous surveys) never collide
        db.UniqueConstraint('survey_id', 'user_id', name='unique_survey_respondent'),
    )

    id = db.Column(db.Integer, primary_key=True)
    survey_id = db.Column(db.Integer, db.ForeignKey('surveys.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    submitted_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    survey = db.relationship('Survey', back_populates='responses')
    user = db.relationship('User', backref=db.backref('survey_responses', lazy='dynamic'))
    answers = db.relationship(
        'SurveyAnswer',
        back_populates='response',
        cascade='all, delete-orphan'
    )

    def __repr__(self):
        return f'<SurveyResponse {self.id} survey={self.survey_id}>'

    def to_dict(self, include_answers=False):
        data = {
            'id': self.id,
            'survey_id': self.survey_id,
            'survey_title': self.survey.title if self.survey else None,
            'user_id': self.user_id,
            'submitted_at': self.submitted_at.isoformat() if self.submitted_at else None,
        }
        if include_answers:
            data['answers'] = [a.to_dict() for a in self.answers]
        return data


class SurveyAnswer(db.Model):
    """
    Value given to one question within a response
    Shape follows the question type; NULL when left unanswered
    """
    __tablename__ = 'survey_answers'

    id = db.Column(db.Integer, primary_key=True)
    response_id = db.Column(
        db.Integer, db.ForeignKey('survey_responses.id', ondelete='CASCADE'), nullable=False, index=True
    )
    survey_id = db.Column(db.Integer, db.ForeignKey('surveys.id', ondelete='CASCADE'), nullable=False, index=True)
    question_id = db.Column(db.Integer, db.ForeignKey('questions.id', ondelete='CASCADE'), nullable=False, index=True)
    value = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    response = db.relationship('SurveyResponse', back_populates='answers')
    survey = db.relationship('Survey', back_populates='answers')
    question = db.relationship('Question', back_populates='answers')

    def __repr__(self):
        return f'<SurveyAnswer q={self.question_id} r={self.response_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'response_id': self.response_id,
            'question_id': self.question_id,
            'value': self.value,
        }
