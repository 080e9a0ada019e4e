# -*- coding: utf-8 -*-
"""
App module.

This module defines the Flask application factory and supporting
functions for initializing the app, registering blueprints, extensions,
error handlers, and loggers.

Usage:
    - In production, import and call `create_app()`.
    - For local development, this script can be run directly:
        python app.py
"""

import logging
import os
import sys

from flask import Flask, jsonify
from flask_cors import CORS

from knowledge_manager.databases.models import Database, UserDatabaseRel
from knowledge_manager.databases.views import blueprint as databases_bp
from knowledge_manager.errors import DomainError
from knowledge_manager.extensions import bcrypt, db, init_redis_client, jwt, migrate
from knowledge_manager.post.models import Post
from knowledge_manager.post.views import blueprint as post_bp
from knowledge_manager.tag.models import PostTagRel, Tag, TagDatabaseRel
from knowledge_manager.tag.views import blueprint as tag_bp
from knowledge_manager.user.models import User
from knowledge_manager.user.views import blueprint as user_bp


def create_app(config_object="knowledge_manager.settings", test_config=None):
    """
    Application factory function.

    Initializes the Flask application with:
        - Configuration from the provided config object
        - Database connection, migrations and the Redis counter store
        - JWT and Bcrypt
        - Blueprints for modular routes
        - Error handlers and shell context

    Args:
        config_object (str): Python path to the configuration object.
        test_config (dict): Values applied on top of the configuration
            before any extension is initialized.

    Returns:
        Flask: Configured Flask application instance.
    """
    app = Flask(__name__.split(".")[0])
    app.config.from_object(config_object)
    if test_config:
        app.config.update(test_config)

    # Enable CORS for frontend communication
    CORS(app, origins=[app.config["CORS_ORIGIN"]], supports_credentials=True)

    # Initialize extensions
    register_extensions(app)

    # Create tables on startup if needed
    with app.app_context():
        try:
            db.create_all()
        except Exception as e:
            app.logger.warning(
                "Skipping table creation on startup; run migrations instead",
                exc_info=e,
            )

    register_blueprints(app)
    register_errorhandlers(app)
    register_shellcontext(app)
    configure_logger(app)

    return app


def register_extensions(app):
    """
    Register Flask extensions with the application.

    Extensions include:
        - Bcrypt for password hashing
        - SQLAlchemy ORM
        - Database migrations
        - JWT for authentication
        - Redis client for failed-attempt counters
    """
    bcrypt.init_app(app)
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    init_redis_client(app)
    return None


def register_blueprints(app):
    """
    Register Flask blueprints for modular route handling.
    """
    app.register_blueprint(user_bp)
    app.register_blueprint(databases_bp)
    app.register_blueprint(post_bp)
    app.register_blueprint(tag_bp)
    return None


def register_errorhandlers(app):
    """
    Register JSON error handlers for common HTTP error codes (401, 404, 500)
    and for domain errors that escape a view.

    Returns JSON responses instead of HTML error pages.
    """
    def render_error(error):
        code = getattr(error, "code", 500)
        desc = getattr(error, "description", "Server Error")
        return jsonify({"code": code, "msg": desc}), code

    def render_domain_error(error):
        app.logger.info("Unhandled domain error: %s", error)
        return jsonify(error.to_dict()), error.status_code

    for errcode in [401, 404, 500]:
        app.errorhandler(errcode)(render_error)
    app.errorhandler(DomainError)(render_domain_error)
    return None


def register_shellcontext(app):
    """
    Register shell context objects for interactive `flask shell`.

    Allows quick access to database and models.
    """
    def shell_context():
        return {
            "db": db,
            "User": User,
            "Database": Database,
            "UserDatabaseRel": UserDatabaseRel,
            "Post": Post,
            "Tag": Tag,
            "PostTagRel": PostTagRel,
            "TagDatabaseRel": TagDatabaseRel,
        }
    app.shell_context_processor(shell_context)


def configure_logger(app):
    """
    Configure the Flask app logger to write to stdout.

    Ensures that logs are captured properly in containerized
    environments like Docker or cloud platforms.
    """
    handler = logging.StreamHandler(sys.stdout)
    if not app.logger.handlers:
        app.logger.addHandler(handler)
    logging.getLogger("knowledge_manager").setLevel(logging.DEBUG if app.debug else logging.INFO)


# Main entrypoint for local development
# In production, the application factory is used by WSGI servers
if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", 5000)))  # nosec B104
