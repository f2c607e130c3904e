# teamlogs/services/validation_service.py
# -*- coding: utf-8 -*-
"""
Validation Layer
Pure checks run against a raw submission before anything touches the database.
Each check returns None on success and raises a ValidationFailed subclass otherwise.
"""
import math
from collections.abc import Mapping

from teamlogs.utils.exceptions import ValidationFailed, MissingField, InvalidScore

REQUIRED_FIELDS = ('session_id', 'member_id', 'team_id', 'date', 'user_name', 'agent_name')

SCORE_MIN = 0
SCORE_MAX = 100

# Checked in this order; the first offending field is reported.
SCORE_FIELDS = (
    ('overall_score', lambda s: s.get('overall_score')),
    ('engagement_score', lambda s: s.get('engagement_score')),
    ('objection_handling_score', lambda s: s.get('objection_handling_score')),
    ('information_gathering_score', lambda s: s.get('information_gathering_score')),
    ('program_explanation_score', lambda s: s.get('program_explanation_score')),
    ('closing_skills_score', lambda s: s.get('closing_skills_score')),
    ('overall_effectiveness_score', lambda s: s.get('overall_effectiveness_score')),
)


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def coerce_score(value) -> float | None:
    """
    Convert a submitted score to a float.

    Returns None when the value cannot be read as a finite number.
    Booleans are not treated as numbers.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def check_required_fields(submission: Mapping) -> None:
    """
    Raises:
        MissingField: If any of REQUIRED_FIELDS is absent or empty.
    """
    missing = [field for field in REQUIRED_FIELDS if _is_blank(submission.get(field))]
    if missing:
        raise MissingField(missing, REQUIRED_FIELDS)


def check_score_bounds(submission: Mapping) -> None:
    """
    Raises:
        InvalidScore: For the first present score that is non-numeric or outside [0, 100].
    """
    for field, accessor in SCORE_FIELDS:
        raw = accessor(submission)
        if raw is None:
            continue  # optional
        score = coerce_score(raw)
        if score is None or score < SCORE_MIN or score > SCORE_MAX:
            raise InvalidScore(field)


def validate_submission(submission) -> None:
    """Run every submission check: required fields first, then score bounds."""
    if not isinstance(submission, Mapping):
        raise ValidationFailed("Invalid request format: Expected a JSON object.")
    check_required_fields(submission)
    check_score_bounds(submission)
