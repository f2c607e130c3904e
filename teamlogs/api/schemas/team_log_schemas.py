# teamlogs/api/schemas/team_log_schemas.py
# -*- coding: utf-8 -*-
"""
Schemas for Team Log API requests and responses.
"""
from datetime import date, datetime, time

from marshmallow import Schema, fields, post_load, EXCLUDE, ValidationError

from teamlogs.database.models.team_log import as_utc


class UtcDateTime(fields.DateTime):
    """
    ISO 8601 datetime that is always timezone-aware UTC.

    Loading also accepts a bare date (YYYY-MM-DD, read as midnight UTC);
    offsets are converted to UTC and naive values are taken to be UTC,
    on both load and dump.
    """

    def _serialize(self, value, attr, obj, **kwargs):
        return super()._serialize(as_utc(value), attr, obj, **kwargs)

    def _deserialize(self, value, attr, data, **kwargs):
        try:
            result = super()._deserialize(value, attr, data, **kwargs)
        except ValidationError as err:
            if not isinstance(value, str):
                raise
            try:
                result = datetime.combine(date.fromisoformat(value.strip()), time.min)
            except ValueError:
                raise err from None
        return as_utc(result)


# Optional text columns: empty strings are stored as NULL
OPTIONAL_TEXT_FIELDS = (
    'user_picture', 'user_avatar', 'agent_picture', 'avatar_category', 'avatar_difficulty',
    'call_recording_url', 'overall_score_text', 'engagement_text', 'objection_handling_text',
    'information_gathering_text', 'program_explanation_text', 'closing_skills_text',
    'overall_effectiveness_text', 'transcript', 'power_moment', 'call_notes',
    'level_up_plan_1', 'level_up_plan_2', 'level_up_plan_3', 'manager_feedback',
)


# Schema for the body of POST /api/team-logs. Runs after the validation layer
# has accepted the raw JSON; converts types for the service.
class TeamLogRequestSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    # Required identity and description
    session_id = fields.String(required=True)
    member_id = fields.String(required=True)
    team_id = fields.String(required=True)
    date = UtcDateTime(required=True)
    user_name = fields.String(required=True)
    agent_name = fields.String(required=True)

    user_picture = fields.String(allow_none=True)
    user_avatar = fields.String(allow_none=True)
    agent_picture = fields.String(allow_none=True)
    avatar_category = fields.String(allow_none=True)
    avatar_difficulty = fields.String(allow_none=True)
    call_recording_url = fields.String(allow_none=True)

    # Scores: bounds are enforced by the validation layer, this only converts
    overall_score = fields.Float(allow_none=True)
    overall_score_text = fields.String(allow_none=True)
    engagement_score = fields.Float(allow_none=True)
    engagement_text = fields.String(allow_none=True)
    objection_handling_score = fields.Float(allow_none=True)
    objection_handling_text = fields.String(allow_none=True)
    information_gathering_score = fields.Float(allow_none=True)
    information_gathering_text = fields.String(allow_none=True)
    program_explanation_score = fields.Float(allow_none=True)
    program_explanation_text = fields.String(allow_none=True)
    closing_skills_score = fields.Float(allow_none=True)
    closing_skills_text = fields.String(allow_none=True)
    overall_effectiveness_score = fields.Float(allow_none=True)
    overall_effectiveness_text = fields.String(allow_none=True)

    transcript = fields.String(allow_none=True)
    power_moment = fields.String(allow_none=True)
    call_notes = fields.String(allow_none=True)
    level_up_plan_1 = fields.String(allow_none=True)
    level_up_plan_2 = fields.String(allow_none=True)
    level_up_plan_3 = fields.String(allow_none=True)
    manager_feedback = fields.String(allow_none=True)

    @post_load
    def blank_optional_text_to_none(self, data, **kwargs):
        for field in OPTIONAL_TEXT_FIELDS:
            if field in data and not data[field]:
                data[field] = None
        return data


# Schema for displaying a single Team Log (API Response)
class TeamLogSchema(Schema):
    id = fields.Integer(dump_only=True)

    session_id = fields.String(dump_only=True)
    member_id = fields.String(dump_only=True)
    team_id = fields.String(dump_only=True)

    date = UtcDateTime(dump_only=True)
    user_name = fields.String(dump_only=True)
    user_picture = fields.String(allow_none=True, dump_only=True)
    user_avatar = fields.String(allow_none=True, dump_only=True)
    agent_name = fields.String(dump_only=True)
    agent_picture = fields.String(allow_none=True, dump_only=True)
    avatar_category = fields.String(allow_none=True, dump_only=True)
    avatar_difficulty = fields.String(allow_none=True, dump_only=True)
    call_recording_url = fields.String(allow_none=True, dump_only=True)

    overall_score = fields.Float(allow_none=True, dump_only=True)
    overall_score_text = fields.String(allow_none=True, dump_only=True)
    engagement_score = fields.Float(allow_none=True, dump_only=True)
    engagement_text = fields.String(allow_none=True, dump_only=True)
    objection_handling_score = fields.Float(allow_none=True, dump_only=True)
    objection_handling_text = fields.String(allow_none=True, dump_only=True)
    information_gathering_score = fields.Float(allow_none=True, dump_only=True)
    information_gathering_text = fields.String(allow_none=True, dump_only=True)
    program_explanation_score = fields.Float(allow_none=True, dump_only=True)
    program_explanation_text = fields.String(allow_none=True, dump_only=True)
    closing_skills_score = fields.Float(allow_none=True, dump_only=True)
    closing_skills_text = fields.String(allow_none=True, dump_only=True)
    overall_effectiveness_score = fields.Float(allow_none=True, dump_only=True)
    overall_effectiveness_text = fields.String(allow_none=True, dump_only=True)

    transcript = fields.String(allow_none=True, dump_only=True)
    power_moment = fields.String(allow_none=True, dump_only=True)
    call_notes = fields.String(allow_none=True, dump_only=True)
    level_up_plan_1 = fields.String(allow_none=True, dump_only=True)
    level_up_plan_2 = fields.String(allow_none=True, dump_only=True)
    level_up_plan_3 = fields.String(allow_none=True, dump_only=True)
    manager_feedback = fields.String(allow_none=True, dump_only=True)

    # Record Timestamps (ISO 8601 UTC)
    created_at = UtcDateTime(dump_only=True)
    updated_at = UtcDateTime(dump_only=True)
