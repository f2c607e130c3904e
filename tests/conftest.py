# tests/conftest.py
# -*- coding: utf-8 -*-
"""
Pytest fixtures for the test suite.

Sets up the Flask application in testing mode, creates a fresh schema for each
test, provides a test client, and points the feedback notifier at an in-process
httpx.MockTransport so no request ever leaves the test run.
"""

import json
import os
import sys
import logging
import threading

import httpx
import pytest

# Add the project root to the Python path so 'teamlogs' imports without installation
project_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_dir not in sys.path:
    sys.path.insert(0, project_dir)

from teamlogs import create_app
from teamlogs.extensions import db as _db, notifier as _notifier
from teamlogs.database import models  # noqa: F401 registers models with metadata


log = logging.getLogger(__name__)


# ---- Application Fixtures ----

@pytest.fixture(scope='session')
def app():
    """
    Session-wide test Flask application instance configured for 'testing'.
    Establishes an application context for the session.
    """
    _app = create_app(config_name='testing')

    ctx = _app.app_context()
    ctx.push()
    log.info("Flask app context pushed for session.")

    yield _app

    ctx.pop()
    _notifier.shutdown()


@pytest.fixture(scope='function')
def db(app):
    """
    Function-scoped schema: tables are created before each test and dropped after,
    so every test starts from an empty Team_Logs table.
    """
    _db.create_all()

    yield _db

    _db.session.remove()
    _db.drop_all()


@pytest.fixture(scope='function')
def client(app, db):
    """Function-scoped test client backed by a fresh database."""
    return app.test_client()


# ---- Webhook Fixtures ----

class WebhookRecorder:
    """
    Stand-in for the automation webhook.

    Records every JSON payload it receives. `status_code` sets the reply,
    `error` makes the transport raise instead of replying, and `gate`
    (a threading.Event) holds each delivery until it is set.
    """

    def __init__(self):
        self.payloads = []
        self.status_code = 200
        self.error = None
        self.gate = None

    def handler(self, request):
        if self.gate is not None:
            self.gate.wait(timeout=5)
        self.payloads.append(json.loads(request.content))
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json={"received": True})

    def hold(self):
        self.gate = threading.Event()
        return self.gate


@pytest.fixture(autouse=True)
def webhook(app):
    """Routes the notifier through a MockTransport for the duration of a test."""
    recorder = WebhookRecorder()
    _notifier.use_transport(httpx.MockTransport(recorder.handler))

    yield recorder

    if recorder.gate is not None:
        recorder.gate.set()
    _notifier.drain(timeout=5)
    _notifier.use_transport(None)


@pytest.fixture
def notifier(app):
    return _notifier


# ---- Data Helpers ----

@pytest.fixture
def make_submission():
    """Factory for a valid POST body; keyword arguments override or add fields."""
    def _make(**overrides):
        submission = {
            "session_id": "s1",
            "member_id": "m1",
            "team_id": "t1",
            "date": "2024-01-01",
            "user_name": "Alice",
            "agent_name": "Bot",
            "overall_score": 85,
            "engagement_score": 70,
        }
        submission.update(overrides)
        return submission
    return _make
