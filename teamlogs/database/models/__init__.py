# teamlogs/database/models/__init__.py
# -*- coding: utf-8 -*-
"""
Models Package Initialization.

Exposes model classes for easier importing throughout the application,
e.g., `from teamlogs.database.models import TeamLogModel`.
"""

from .team_log import TeamLogModel

__all__ = [
    'TeamLogModel',
]
