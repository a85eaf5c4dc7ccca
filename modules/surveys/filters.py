"""
Surveys Module - List Filters
Local predicates applied to an already fetched survey list.
"""


def matches_search(survey, query):
    """Case-insensitive substring match on title or description"""
    needle = (query or '').strip().lower()
    if not needle:
        return True
    title = (survey.title or '').lower()
    description = (survey.description or '').lower()
    return needle in title or needle in description


def matches_status(survey, status):
    """Status equality; empty or 'all' matches everything"""
    if not status or status == 'all':
        return True
    return survey.status == status


def filter_surveys(surveys, query=None, status=None):
    """Surveys passing both the search and the status filter"""
    return [
        survey for survey in surveys
        if matches_search(survey, query) and matches_status(survey, status)
    ]
