# teamlogs/services/team_log_service.py
# -*- coding: utf-8 -*-
"""
Team Log Service
Handles creating, listing and annotating scored call evaluations.
Adds/Updates objects in the session but DOES NOT COMMIT; routes own the transaction.
"""
from datetime import timedelta

from flask import current_app
from sqlalchemy.exc import IntegrityError, OperationalError, InterfaceError, DisconnectionError, SQLAlchemyError

from teamlogs.database.models.team_log import TeamLogModel, as_utc, utcnow
from teamlogs.extensions import db
from teamlogs.services.validation_service import validate_submission
from teamlogs.utils.exceptions import (
    ConflictError,
    MissingParameter,
    ResourceNotFound,
    StoreFailure,
    StoreReadFailed,
    StoreUnavailable,
    StoreWriteFailed,
    ValidationFailed,
)

# Columns a submission may set; bookkeeping columns are always server-assigned
WRITABLE_COLUMNS = frozenset(
    column.name for column in TeamLogModel.__table__.columns
    if column.name not in ('id', 'created_at', 'updated_at')
)

UNIQUE_CONSTRAINT_NAME = 'uq_team_logs_session_member'


def store_failure_from(error: SQLAlchemyError, write: bool, message: str | None = None) -> StoreFailure:
    """Map a SQLAlchemy error onto the StoreFailure hierarchy, keeping the driver message as details."""
    details = str(getattr(error, 'orig', None) or error)
    if isinstance(error, (OperationalError, InterfaceError, DisconnectionError)):
        return StoreUnavailable(message, details=details)
    if write:
        return StoreWriteFailed(message, details=details)
    return StoreReadFailed(message, details=details)


def _is_duplicate_key(error: IntegrityError) -> bool:
    error_msg = str(getattr(error, 'orig', error)).lower()
    return UNIQUE_CONSTRAINT_NAME in error_msg or 'unique constraint failed' in error_msg


class TeamLogService:

    @staticmethod
    def create_log(log_data: dict) -> TeamLogModel:
        """
        Adds a new team log to the session and flushes it (DOES NOT COMMIT).

        Args:
            log_data (dict): Submission loaded by TeamLogRequestSchema (dates parsed, scores as floats).

        Returns:
            TeamLogModel: The new record with created_at/updated_at assigned.

        Raises:
            ValidationFailed: If required fields are missing or a score is out of range.
            ConflictError: If a log for (session_id, member_id) already exists.
            StoreFailure: If the insert cannot complete.
        """
        logger = current_app.logger
        validate_submission(log_data)

        session_id = log_data['session_id']
        member_id = log_data['member_id']
        logger.info(f"Creating team log: session {session_id}, member {member_id}, team {log_data['team_id']}")

        session = db.session
        try:
            exists = session.query(TeamLogModel.id).filter_by(session_id=session_id, member_id=member_id).first()
            if exists:
                raise ConflictError(f"Team log for session '{session_id}' and member '{member_id}' already exists.")

            now = utcnow()
            new_log = TeamLogModel(
                **{key: value for key, value in log_data.items() if key in WRITABLE_COLUMNS},
                created_at=now,
                updated_at=now,
            )
            session.add(new_log)
            session.flush()
            logger.debug(f"Team log {new_log.id} staged in session.")
            return new_log

        except IntegrityError as e:
            session.rollback()
            if _is_duplicate_key(e):
                logger.warning(f"Duplicate team log for session {session_id}, member {member_id}: {e.orig}")
                raise ConflictError(f"Team log for session '{session_id}' and member '{member_id}' already exists.")
            logger.error(f"Database integrity error creating team log for session {session_id}: {e}", exc_info=True)
            raise store_failure_from(e, write=True, message="Failed to create team log")
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database error creating team log for session {session_id}: {e}", exc_info=True)
            raise store_failure_from(e, write=True, message="Failed to create team log")

    @staticmethod
    def list_by_team(team_id: str | None, member_id: str | None) -> list[TeamLogModel]:
        """
        Returns every log of a team, most recent call first.

        member_id is required from callers but does not narrow the result:
        the team view shows every member's calls.

        Raises:
            MissingParameter: If team_id or member_id is absent.
            StoreFailure: If the query fails.
        """
        if not team_id or not member_id:
            raise MissingParameter("Team ID and Member ID required")

        current_app.logger.debug(f"Listing team logs for team {team_id} (requested by member {member_id})")
        try:
            query = (
                db.select(TeamLogModel)
                .filter_by(team_id=team_id)
                .order_by(TeamLogModel.date.desc(), TeamLogModel.id.desc())
            )
            return list(db.session.execute(query).scalars())
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Database error fetching team logs for team {team_id}: {e}", exc_info=True)
            raise store_failure_from(e, write=False, message="Failed to fetch team logs")

    @staticmethod
    def annotate(member_id: str | None, session_id: str | None, manager_feedback) -> TeamLogModel:
        """
        Sets manager feedback on an existing log and refreshes updated_at (DOES NOT COMMIT).

        updated_at always moves strictly forward, even when the clock has not
        advanced since the previous write.

        Raises:
            MissingParameter: If an identifier or the feedback is absent.
            ValidationFailed: If the feedback is not a string.
            ResourceNotFound: If no log matches (member_id, session_id).
            StoreFailure: If the update cannot complete.
        """
        if not member_id or not session_id:
            raise MissingParameter("Member ID and Session ID required")
        if manager_feedback is None or manager_feedback == '':
            raise MissingParameter("Manager feedback required")
        if not isinstance(manager_feedback, str):
            raise ValidationFailed("Manager feedback must be a string")

        logger = current_app.logger
        session = db.session
        try:
            team_log = session.execute(
                db.select(TeamLogModel).filter_by(member_id=member_id, session_id=session_id)
            ).scalar_one_or_none()
            if team_log is None:
                logger.info(f"Annotation target not found: member {member_id}, session {session_id}")
                raise ResourceNotFound("Log not found")

            now = utcnow()
            previous = as_utc(team_log.updated_at)
            if previous is not None and now <= previous:
                now = previous + timedelta(microseconds=1)

            team_log.manager_feedback = manager_feedback
            team_log.updated_at = now
            session.flush()
            logger.info(f"Manager feedback staged for team log {team_log.id} (session {session_id}).")
            return team_log

        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database error annotating log for member {member_id}, session {session_id}: {e}", exc_info=True)
            raise store_failure_from(e, write=True, message="Failed to update team log")
