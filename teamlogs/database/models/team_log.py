# teamlogs/database/models/team_log.py
# -*- coding: utf-8 -*-
"""Team Log model for storing scored call evaluations."""

from datetime import datetime, timezone

from sqlalchemy.sql import func
from teamlogs.extensions import db


def utcnow():
    return datetime.now(timezone.utc)


def as_utc(value):
    """Aware values are converted to UTC; naive ones (as SQLite returns them) are taken to be UTC."""
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value.astimezone(timezone.utc)


class TeamLogModel(db.Model):
    """
    One scored evaluation of a practice call made by a team member.
    Created once by ingestion; afterwards only manager_feedback and updated_at change.
    """
    __tablename__ = 'Team_Logs'
    __table_args__ = (
        # A call session is logged once per member; duplicates are rejected, not upserted
        db.UniqueConstraint('session_id', 'member_id', name='uq_team_logs_session_member'),
        db.Index('ix_team_logs_team_id_date', 'team_id', 'date'),
    )

    id = db.Column(db.Integer, primary_key=True)

    # --- Identity ---
    session_id = db.Column(db.String(255), nullable=False, index=True)
    member_id = db.Column(db.String(255), nullable=False)
    team_id = db.Column(db.String(255), nullable=False)

    # --- Call Description ---
    date = db.Column(db.TIMESTAMP(timezone=True), nullable=False)
    user_name = db.Column(db.String(255), nullable=False)
    user_picture = db.Column(db.Text, nullable=True)
    user_avatar = db.Column(db.Text, nullable=True)
    agent_name = db.Column(db.String(255), nullable=False)
    agent_picture = db.Column(db.Text, nullable=True)
    avatar_category = db.Column(db.String(255), nullable=True)
    avatar_difficulty = db.Column(db.String(255), nullable=True)
    call_recording_url = db.Column(db.Text, nullable=True)

    # --- Scores (0-100) with optional rationale ---
    overall_score = db.Column(db.Float, nullable=True)
    overall_score_text = db.Column(db.Text, nullable=True)
    engagement_score = db.Column(db.Float, nullable=True)
    engagement_text = db.Column(db.Text, nullable=True)
    objection_handling_score = db.Column(db.Float, nullable=True)
    objection_handling_text = db.Column(db.Text, nullable=True)
    information_gathering_score = db.Column(db.Float, nullable=True)
    information_gathering_text = db.Column(db.Text, nullable=True)
    program_explanation_score = db.Column(db.Float, nullable=True)
    program_explanation_text = db.Column(db.Text, nullable=True)
    closing_skills_score = db.Column(db.Float, nullable=True)
    closing_skills_text = db.Column(db.Text, nullable=True)
    overall_effectiveness_score = db.Column(db.Float, nullable=True)
    overall_effectiveness_text = db.Column(db.Text, nullable=True)

    # --- Narrative ---
    transcript = db.Column(db.Text, nullable=True)
    power_moment = db.Column(db.Text, nullable=True)
    call_notes = db.Column(db.Text, nullable=True)
    level_up_plan_1 = db.Column(db.Text, nullable=True)
    level_up_plan_2 = db.Column(db.Text, nullable=True)
    level_up_plan_3 = db.Column(db.Text, nullable=True)
    manager_feedback = db.Column(db.Text, nullable=True)

    # --- Record Timestamps ---
    created_at = db.Column(db.TIMESTAMP(timezone=True), nullable=False, default=utcnow, server_default=func.now())
    updated_at = db.Column(db.TIMESTAMP(timezone=True), nullable=False, default=utcnow, server_default=func.now())

    def __repr__(self):
        """Represent instance as a unique string."""
        return f"<TeamLog(id={self.id}, session='{self.session_id}', member='{self.member_id}', team='{self.team_id}')>"
