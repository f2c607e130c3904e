# teamlogs/__init__.py
# -*- coding: utf-8 -*-
"""Main application package setup."""

import os
import logging

import click
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from .config import config
from .extensions import db, cors, notifier
from .utils.exceptions import ServiceError


def create_app(config_name=None):
    """
    Create and configure an instance of the Flask application using the App Factory pattern.

    Args:
        config_name (str, optional): The name of the configuration to use ('development', 'testing', 'production').
                                     Defaults to FLASK_ENV environment variable or 'default'.

    Returns:
        Flask: The configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'default')
    if config_name not in config:
        raise ValueError(f"Invalid configuration name: {config_name}")

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # Configure logging level before anything else logs
    log_level_name = (app.config.get('LOG_LEVEL') or ('DEBUG' if app.debug else 'INFO')).upper()
    log_level = getattr(logging, log_level_name, logging.INFO)
    app.logger.setLevel(log_level)
    for handler in app.logger.handlers:
        handler.setLevel(log_level)

    config[config_name].init_app(app)
    app.logger.info(f"App created with configuration: '{config_name}'")

    # Initialize Flask extensions
    db.init_app(app)
    notifier.init_app(app)

    origins = app.config.get('CORS_ORIGINS') or '*'
    if origins != '*':
        origins = [origin.strip() for origin in origins.split(',') if origin.strip()]
    cors.init_app(app, origins=origins, methods=app.config['CORS_METHODS'], allow_headers=app.config['CORS_HEADERS'],
                  send_wildcard=(origins == '*'))

    # --- Register Blueprints ---
    from .api.routes.team_logs import team_logs_bp
    app.register_blueprint(team_logs_bp, url_prefix='/api/team-logs')

    # --- Basic Routes & Health Check ---
    @app.route('/health')
    def health_check():
        return {"status": "ok", "message": "Application is running."}, 200

    # --- Error Handlers ---
    # Every error leaves as JSON with an 'error' key.

    @app.errorhandler(ServiceError)
    def handle_service_error(error):
        db.session.rollback()
        if error.status_code >= 500:
            app.logger.error(f"Service Error ({error.status_code}): {error} Details: {getattr(error, 'details', None)}")
        else:
            app.logger.warning(f"Service Error ({error.status_code}): {error} (Path: {request.path})")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        if error.code >= 500:
            app.logger.error(f"HTTP Error ({error.code}): {error.description}")
        else:
            app.logger.info(f"HTTP Error ({error.code}): {error.description} (Path: {request.path})")
        return jsonify(error=error.description or error.name), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        app.logger.error(f"Internal Server Error (500): {error}", exc_info=error)
        try:
            db.session.rollback()
        except Exception as rb_err:
            app.logger.error(f"Error during automatic rollback after 500 error: {rb_err}", exc_info=True)
        return jsonify(error="Internal server error.", details=str(error)), 500

    # --- CLI ---
    @app.cli.command('init-db')
    def init_db_command():
        """Create the Team_Logs table and its indexes if they do not exist."""
        from .database import models  # noqa: F401 registers models with metadata
        db.create_all()
        click.echo("Initialized the team logs database.")

    @app.shell_context_processor
    def make_shell_context():
        from .database import models
        return {'db': db, 'models': models, 'notifier': notifier}

    return app
