# tests/integration/services/test_team_log_service.py
"""Service-level tests for TeamLogService, run inside the session app context."""
from datetime import datetime, timezone

import pytest

from teamlogs.api.schemas.team_log_schemas import TeamLogRequestSchema
from teamlogs.database.models import TeamLogModel
from teamlogs.database.models.team_log import as_utc
from teamlogs.services import team_log_service
from teamlogs.services.team_log_service import TeamLogService
from teamlogs.utils.exceptions import (
    ConflictError, MissingField, InvalidScore, MissingParameter, ResourceNotFound, ValidationFailed
)


def load(submission):
    return TeamLogRequestSchema().load(submission)


def test_create_log_success(db, make_submission):
    team_log = TeamLogService.create_log(load(make_submission()))
    db.session.commit()

    assert team_log.id is not None
    assert team_log.session_id == 's1'
    assert team_log.overall_score == 85.0
    assert team_log.created_at == team_log.updated_at

    from_db = db.session.get(TeamLogModel, team_log.id)
    assert from_db.team_id == 't1'


def test_create_log_duplicate_raises_conflict(db, make_submission):
    TeamLogService.create_log(load(make_submission()))
    db.session.commit()

    with pytest.raises(ConflictError):
        TeamLogService.create_log(load(make_submission(user_name='Someone else')))


def test_create_log_validates_before_insert(db, make_submission):
    data = load(make_submission())
    data['user_name'] = '  '
    with pytest.raises(MissingField):
        TeamLogService.create_log(data)

    data = load(make_submission())
    data['closing_skills_score'] = 101.0
    with pytest.raises(InvalidScore):
        TeamLogService.create_log(data)

    assert db.session.query(TeamLogModel).count() == 0


def test_create_log_ignores_bookkeeping_fields(db, make_submission):
    data = load(make_submission())
    data['created_at'] = datetime(2000, 1, 1, tzinfo=timezone.utc)
    data['id'] = 999

    team_log = TeamLogService.create_log(data)
    db.session.commit()

    assert team_log.id != 999
    assert team_log.created_at.year != 2000


def test_list_by_team_orders_by_date_desc(db, make_submission):
    for session_id, day in (('old', '2023-12-31'), ('new', '2024-06-01'), ('mid', '2024-03-15')):
        TeamLogService.create_log(load(make_submission(session_id=session_id, date=day)))
    TeamLogService.create_log(load(make_submission(session_id='elsewhere', team_id='t2')))
    db.session.commit()

    team_logs = TeamLogService.list_by_team('t1', 'm1')

    assert [log.session_id for log in team_logs] == ['new', 'mid', 'old']


def test_list_by_team_member_does_not_filter(db, make_submission):
    TeamLogService.create_log(load(make_submission(session_id='a', member_id='m1')))
    TeamLogService.create_log(load(make_submission(session_id='b', member_id='m2')))
    db.session.commit()

    assert len(TeamLogService.list_by_team('t1', 'someone-else')) == 2


@pytest.mark.parametrize('team_id, member_id', [(None, 'm1'), ('t1', None), ('', ''), (None, None)])
def test_list_by_team_requires_identifiers(db, team_id, member_id):
    with pytest.raises(MissingParameter):
        TeamLogService.list_by_team(team_id, member_id)


def test_annotate_sets_feedback(db, make_submission):
    TeamLogService.create_log(load(make_submission()))
    db.session.commit()

    team_log = TeamLogService.annotate('m1', 's1', 'Great job')
    db.session.commit()

    assert team_log.manager_feedback == 'Great job'
    assert db.session.query(TeamLogModel).one().manager_feedback == 'Great job'


def test_annotate_moves_updated_at_forward_when_clock_stalls(db, make_submission, monkeypatch):
    frozen = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    monkeypatch.setattr(team_log_service, 'utcnow', lambda: frozen)

    TeamLogService.create_log(load(make_submission()))
    db.session.commit()

    first = TeamLogService.annotate('m1', 's1', 'F1').updated_at
    db.session.commit()
    second = TeamLogService.annotate('m1', 's1', 'F2').updated_at
    db.session.commit()
    assert as_utc(first) > frozen
    assert as_utc(second) > as_utc(first)


def test_annotate_not_found(db, make_submission):
    TeamLogService.create_log(load(make_submission()))
    db.session.commit()

    with pytest.raises(ResourceNotFound):
        TeamLogService.annotate('m1', 'missing-session', 'Great job')
    assert db.session.query(TeamLogModel).one().manager_feedback is None


@pytest.mark.parametrize('member_id, session_id, feedback', [
    (None, 's1', 'x'), ('m1', None, 'x'), ('m1', 's1', None), ('m1', 's1', ''),
])
def test_annotate_requires_parameters(db, member_id, session_id, feedback):
    with pytest.raises(MissingParameter):
        TeamLogService.annotate(member_id, session_id, feedback)


def test_annotate_rejects_non_string_feedback(db):
    with pytest.raises(ValidationFailed):
        TeamLogService.annotate('m1', 's1', {'text': 'Great job'})
