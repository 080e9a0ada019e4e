# -*- coding: utf-8 -*-
"""
Identity provider.

Looks users up by email or name and registers new ones. Password
hashing happens before ``create_user`` is called; this module only
stores the digest it is given.
"""

import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from knowledge_manager.errors import Conflict, ErrorCode
from knowledge_manager.extensions import db
from knowledge_manager.user.models import User

logger = logging.getLogger(__name__)


def get_user_by_identifier(identifier):
    """Return the user whose email or name equals ``identifier``, or ``None``."""
    return User.query.filter(or_(User.email == identifier, User.name == identifier)).first()


def create_user(name, email, password_digest):
    """
    Insert a new user.

    Returns:
        int: The new user's id.

    Raises:
        Conflict: ``conflict:name`` and/or ``conflict:email`` when either
            value is already taken.
    """
    user = User(name=name, email=email, password_digest=password_digest)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        codes = []
        if User.query.filter_by(name=name).first():
            codes.append(ErrorCode.CONFLICT_NAME)
        if User.query.filter_by(email=email).first():
            codes.append(ErrorCode.CONFLICT_EMAIL)
        if not codes:
            raise
        raise Conflict(*codes)

    logger.info("Created user %s", user.id)
    return user.id
