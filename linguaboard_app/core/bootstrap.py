"""Bootstrap helpers for configuring the Flask application."""

from __future__ import annotations

from flask import Flask

from ..extensions import db, scheduler
from .logging_config import setup_logging
from .module_registry import register_default_modules


def configure_logging(app: Flask) -> None:
    """Route the Flask app logger through the shared Linguaboard handlers."""

    base_logger = setup_logging(
        app,
        log_level=app.config.get("LOG_LEVEL", "INFO"),
        log_dir=app.config.get("LOG_DIR"),
        json_format=app.config.get("LOG_JSON", False),
        to_file=app.config.get("LOG_TO_FILE", True),
    )

    app.logger.handlers.clear()
    for handler in base_logger.handlers:
        app.logger.addHandler(handler)
    app.logger.setLevel(base_logger.level)
    app.logger.propagate = False
    app.logger.info("Flask app logger configured successfully.")


def register_extensions(app: Flask) -> None:
    """Initialize shared extensions with the Flask app instance."""

    db.init_app(app)

    if not app.config.get("SCHEDULER_ENABLED", False):
        app.logger.info("Scheduler disabled, skipping reconciliation job registration.")
        return

    from apscheduler.schedulers import SchedulerAlreadyRunningError

    try:
        scheduler.init_app(app)
        if not scheduler.running:
            scheduler.start()

        from ..modules.gamification.tasks import reconcile_point_totals

        if not scheduler.get_job("reconcile_point_totals"):
            scheduler.add_job(
                id="reconcile_point_totals",
                func=reconcile_point_totals,
                trigger="cron",
                hour=app.config.get("RECONCILE_JOB_HOUR", 3),
                minute=0,
                replace_existing=True,
            )
            app.logger.info(
                "Registered reconciliation job at %02d:00.", app.config.get("RECONCILE_JOB_HOUR", 3)
            )
    except SchedulerAlreadyRunningError:
        app.logger.info("Scheduler already running, skipping re-initialisation.")


def register_blueprints(app: Flask) -> None:
    """Register all default blueprints with the app."""

    register_default_modules(app)


def initialize_database(app: Flask) -> None:
    """Create database tables for every registered model."""

    # Import models so their tables are attached to the metadata.
    from ..modules.gamification import models  # noqa: F401

    db.create_all()
    app.logger.info("Database tables ensured at %s", app.config.get("SQLALCHEMY_DATABASE_URI"))
