"""
Surveys Module - Models
Surveys and their ordered questions
"""

from datetime import datetime
from extensions import db


SURVEY_STATUSES = ('draft', 'pending', 'active', 'closed', 'archived')

QUESTION_TYPES = ('multiple_choice', 'checkbox', 'rating_scale', 'text_input', 'textarea', 'dropdown')

# Question types answered by picking from the option list
CHOICE_TYPES = ('multiple_choice', 'checkbox', 'dropdown')

DEFAULT_MIN_RATING = 1
DEFAULT_MAX_RATING = 5


class Survey(db.Model):
    """
    Survey - container of ordered questions

    Statuses:
    - draft: being built, not visible to respondents
    - pending: submitted by staff, waiting for admin approval
    - active: open for responses
    - closed: no longer accepting responses
    - archived: kept for reporting only
    """
    __tablename__ = 'surveys'

    id = db.Column(db.Integer, primary_key=True)

    # Basic info
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)

    # Status
    status = db.Column(
        db.Enum(*SURVEY_STATUSES, name='survey_status'),
        default='draft',
        nullable=False,
        index=True
    )

    # Settings
    is_anonymous = db.Column(db.Boolean, default=False)  # responder id is not stored

    # Optional response window
    start_date = db.Column(db.DateTime, nullable=True)
    end_date = db.Column(db.DateTime, nullable=True)

    # Metadata
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    owner = db.relationship('User', backref=db.backref('surveys', lazy='dynamic'), foreign_keys=[created_by])
    questions = db.relationship(
        'Question',
        back_populates='survey',
        cascade='all, delete-orphan',
        order_by='Question.order_index'
    )
    responses = db.relationship(
        'SurveyResponse',
        back_populates='survey',
        lazy='dynamic',
        cascade='all, delete-orphan'
    )
    answers = db.relationship(
        'SurveyAnswer',
        back_populates='survey',
        lazy='dynamic',
        cascade='all, delete-orphan'
    )

    def __repr__(self):
        return f'<Survey {self.title}>'

    # ============================================
    # Status Helpers
    # ============================================

    @property
    def is_editable(self):
        """Questions can only be rewritten before the survey goes live"""
        return self.status in ('draft', 'pending')

    def is_open_at(self, moment):
        """Whether the response window contains the given moment"""
        if self.start_date and moment < self.start_date:
            return False
        if self.end_date and moment >= self.end_date:
            return False
        return True

    @property
    def can_respond(self):
        """Whether the survey accepts responses right now"""
        return self.status == 'active' and self.is_open_at(datetime.utcnow())

    def check_and_update_status(self):
        """
        Closes an active survey whose end date has passed.
        Called whenever the survey is accessed.

        Returns:
            bool: True if the status changed
        """
        if self.status == 'active' and self.end_date and datetime.utcnow() >= self.end_date:
            self.status = 'closed'
            db.session.commit()
            return True

        return False

    # ============================================
    # Questions
    # ============================================

    def get_questions_ordered(self):
        """Questions sorted by order_index"""
        return sorted(self.questions, key=lambda q: q.order_index)

    @property
    def responses_count(self):
        return self.responses.count()

    def to_dict(self, include_questions=False):
        data = {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'status': self.status,
            'is_anonymous': bool(self.is_anonymous),
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'end_date': self.end_date.isoformat() if self.end_date else None,
            'created_by': self.created_by,
            'owner_name': self.owner.full_name if self.owner else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'question_count': len(self.questions),
        }
        if include_questions:
            data['questions'] = [q.to_dict() for q in self.get_questions_ordered()]
        return data


class Question(db.Model):
    """
    Question of a survey

    Types:
    - multiple_choice: single select (radio)
    - checkbox: multi select
    - dropdown: single select (drop-down list)
    - rating_scale: integer between min_rating and max_rating
    - text_input: short free text
    - textarea: long free text
    """
    __tablename__ = 'questions'

    id = db.Column(db.Integer, primary_key=True)
    survey_id = db.Column(db.Integer, db.ForeignKey('surveys.id', ondelete='CASCADE'), nullable=False, index=True)

    question_text = db.Column(db.Text, nullable=False)
    question_type = db.Column(
        db.Enum(*QUESTION_TYPES, name='question_type'),
        nullable=False
    )
    is_required = db.Column(db.Boolean, default=False)

    # Options for choice types (JSON array of {"id": ..., "label": ...})
    options = db.Column(db.JSON, nullable=True)

    # Bounds for rating_scale
    min_rating = db.Column(db.Integer, nullable=True)
    max_rating = db.Column(db.Integer, nullable=True)

    # Dense 0-based position within the survey
    order_index = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    survey = db.relationship('Survey', back_populates='questions')
    answers = db.relationship(
        'SurveyAnswer',
        back_populates='question',
        lazy='dynamic',
        cascade='all, delete-orphan'
    )

    def __repr__(self):
        return f'<Question {self.question_type} #{self.id}>'

    @property
    def needs_options(self):
        """Whether the question is answered from its option list"""
        return self.question_type in CHOICE_TYPES

    @property
    def option_ids(self):
        return [opt['id'] for opt in (self.options or [])]

    @property
    def rating_bounds(self):
        low = self.min_rating if self.min_rating is not None else DEFAULT_MIN_RATING
        high = self.max_rating if self.max_rating is not None else DEFAULT_MAX_RATING
        return low, high

    def to_dict(self):
        data = {
            'id': self.id,
            'survey_id': self.survey_id,
            'question_text': self.question_text,
            'question_type': self.question_type,
            'is_required': bool(self.is_required),
            'options': list(self.options or []),
            'order_index': self.order_index,
        }
        if self.question_type == 'rating_scale':
            data['min_rating'], data['max_rating'] = self.rating_bounds
        return data
