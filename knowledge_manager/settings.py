# -*- coding: utf-8 -*-
"""
Application configuration module.

This file centralizes all Flask application settings.
Most configuration values are loaded from environment variables for flexibility and security.
For local development, use a `.env` file to set environment variables.

Sections:
    - Environment settings
    - Database settings
    - Flask and extension settings
    - JWT authentication
    - Redis and rate limiting
"""

from environs import Env

# Initialize environment variable handler
env = Env()
env.read_env()

# =============================
# Environment settings
# =============================
# Application environment (production/development/testing)
ENV = env.str("FLASK_ENV", default="production")
# Enable debug mode if running in development
DEBUG = ENV == "development"

# =============================
# Database configuration
# =============================
# Primary database URL (PostgreSQL/SQLite); defaults to SQLite for local usage
SQLALCHEMY_DATABASE_URI = env.str("DATABASE_URL", default="sqlite:///knowledge_manager.sqlite")
# Disable SQLAlchemy event system to reduce overhead
SQLALCHEMY_TRACK_MODIFICATIONS = False

# =============================
# Flask core and extension settings
# =============================
# Secret key for Flask sessions
SECRET_KEY = env.str("SECRET_KEY", default="not-so-secret")
# Bcrypt hashing rounds for password hashing (higher = more secure but slower)
BCRYPT_LOG_ROUNDS = env.int("BCRYPT_LOG_ROUNDS", default=13)
# Frontend origin allowed to call the API
CORS_ORIGIN = env.str("CORS_ORIGIN", default="http://localhost:5173")

# =============================
# JWT (JSON Web Token) configuration
# =============================
# Secret key used to sign JWT tokens
JWT_SECRET_KEY = env.str("JWT_SECRET_KEY", default=SECRET_KEY)
# Access token expiration time in seconds (30 days by default)
JWT_ACCESS_TOKEN_EXPIRES = env.int("JWT_ACCESS_TOKEN_EXPIRES", default=2592000)

# =============================
# Redis and rate limiting
# =============================
# Counter store for failed attempts
REDIS_URL = env.str("REDIS_URL", default="redis://localhost:6379/0")
# Failed attempts allowed per window (seconds) before requests are refused
LOGIN_RATE_LIMIT = env.int("LOGIN_RATE_LIMIT", default=6)
LOGIN_RATE_PERIOD = env.int("LOGIN_RATE_PERIOD", default=10)
SIGNUP_RATE_LIMIT = env.int("SIGNUP_RATE_LIMIT", default=8)
SIGNUP_RATE_PERIOD = env.int("SIGNUP_RATE_PERIOD", default=10)
# Every other mutating form (posts, databases, tags, viewers)
FORM_RATE_LIMIT = env.int("FORM_RATE_LIMIT", default=6)
FORM_RATE_PERIOD = env.int("FORM_RATE_PERIOD", default=10)
