"""Application-wide extensions.

This module centralizes extension instances so they can be imported without
causing circular dependencies between the app factory, blueprints and services.
"""

from flask_apscheduler import APScheduler

from .db_instance import db

scheduler = APScheduler()

__all__ = ["db", "scheduler"]
