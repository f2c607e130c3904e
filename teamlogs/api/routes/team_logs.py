# teamlogs/api/routes/team_logs.py
# -*- coding: utf-8 -*-
"""
API Routes for creating, listing and annotating Team Logs.
Routes own the transaction: services stage changes, routes commit or roll back.
Service exceptions propagate to the application's ServiceError handler.
"""
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from teamlogs.extensions import db, notifier
from teamlogs.services.team_log_service import TeamLogService, store_failure_from
from teamlogs.services.validation_service import validate_submission
from teamlogs.utils.exceptions import ValidationFailed
from teamlogs.api.schemas.team_log_schemas import TeamLogRequestSchema, TeamLogSchema

# Create Blueprint
team_logs_bp = Blueprint('team_logs_api', __name__)

# Instantiate schemas
team_log_request_schema = TeamLogRequestSchema()
team_log_schema = TeamLogSchema()
team_log_list_schema = TeamLogSchema(many=True)


@team_logs_bp.after_request
def add_cors_allow_headers(response):
    """
    List the allowed methods and headers on every response, not only on preflights.
    Flask-Cors still sets the origin header and answers real preflights.
    """
    if request.method == 'OPTIONS' and 'Access-Control-Request-Method' in request.headers:
        return response
    response.headers.setdefault('Access-Control-Allow-Methods', ', '.join(current_app.config['CORS_METHODS']))
    response.headers.setdefault('Access-Control-Allow-Headers', ', '.join(current_app.config['CORS_HEADERS']))
    return response


def _commit(failure_message):
    """Commit the request's unit of work, mapping database errors to StoreFailure."""
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Commit failed: {e}", exc_info=True)
        raise store_failure_from(e, write=True, message=failure_message)


@team_logs_bp.route('', methods=['POST'])
def create_team_log():
    """Create a team log from a fully populated submission."""
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValidationFailed("Invalid request format: Expected JSON.")

    # Required fields and score bounds are checked before any store access
    validate_submission(payload)

    try:
        log_data = team_log_request_schema.load(payload)
    except ValidationError as err:
        current_app.logger.warning(f"Invalid team log data for session {payload.get('session_id')}: {err.messages}")
        return jsonify({"error": "Invalid team log data", "errors": err.messages}), 400

    new_log = TeamLogService.create_log(log_data)
    _commit("Failed to create team log")
    current_app.logger.info(f"Committed team log {new_log.id} for session {new_log.session_id}")

    return jsonify(team_log_schema.dump(new_log)), 200


@team_logs_bp.route('', methods=['GET'])
def list_team_logs():
    """List every log of a team, most recent first. Requires teamId and memberId."""
    team_logs = TeamLogService.list_by_team(request.args.get('teamId'), request.args.get('memberId'))
    return jsonify(team_log_list_schema.dump(team_logs)), 200


@team_logs_bp.route('', methods=['PUT'])
def annotate_team_log():
    """
    Save manager feedback on a log, then relay it to the automation webhook.

    The webhook runs in the background after the commit; its outcome never
    changes this response.
    """
    member_id = request.args.get('member_id')
    session_id = request.args.get('session_id')
    if member_id and session_id:
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            raise ValidationFailed("Invalid request format: Expected a JSON object.")
        manager_feedback = body.get('manager_feedback')
    else:
        manager_feedback = None

    team_log = TeamLogService.annotate(member_id, session_id, manager_feedback)
    _commit("Failed to update team log")
    current_app.logger.info(f"Committed manager feedback for member {member_id}, session {session_id}")

    notifier.notify_feedback(session_id, manager_feedback)

    return jsonify(team_log_schema.dump(team_log)), 200
