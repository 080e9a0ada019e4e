# -*- coding: utf-8 -*-
"""
Extensions module.

Each extension is initialized in the app factory located in app.py.
The Redis connection used by the rate limiter is not a Flask extension,
so it is stored on ``app.extensions`` and fetched with ``get_redis_client``.
"""

import redis
from flask import current_app
from flask_bcrypt import Bcrypt
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

bcrypt = Bcrypt()
db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()


def init_redis_client(app):
    """
    Create the Redis client for the application.

    The connection is opened lazily on the first command, so tests can
    swap ``app.extensions["redis"]`` for a fake client after start-up.
    """
    app.extensions["redis"] = redis.from_url(app.config["REDIS_URL"], decode_responses=True)
    return app.extensions["redis"]


def get_redis_client():
    """Return the Redis client bound to the current application."""
    return current_app.extensions["redis"]
