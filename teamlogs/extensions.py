# teamlogs/extensions.py
# -*- coding: utf-8 -*-
"""
Flask extensions instances and configuration.
Central place to initialize extensions to avoid circular imports.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS

from .services.notification_service import FeedbackNotifier

# Database ORM: owns the process-wide engine and connection pool
db = SQLAlchemy()

# Cross-origin headers on every response, including OPTIONS preflight
cors = CORS()

# Fire-and-forget delivery of manager feedback to the automation webhook
notifier = FeedbackNotifier()
