# -*- coding: utf-8 -*-
"""
Access control guard.

Two permission levels exist per database:
    - owner: full control, including deleting the database, managing
      viewers and creating, editing or deleting posts and their tags.
    - viewer: read-only access to the database and its posts.

The predicates answer questions; the ``require_*`` helpers raise the
matching domain error and are what services call before mutating.
"""

import logging

from knowledge_manager.databases.models import Database, Permission, UserDatabaseRel
from knowledge_manager.errors import ErrorCode, NotFound, PermissionDenied
from knowledge_manager.extensions import db
from knowledge_manager.post.models import Post

logger = logging.getLogger(__name__)


def permission_for(user_id, database_id):
    """Return the user's permission type on the database, or ``None``."""
    if user_id is None:
        return None
    rel = UserDatabaseRel.query.filter_by(user_id=user_id, database_id=database_id).first()
    return Permission(rel.permission_type) if rel else None


def has_any_relation(user_id, database_id):
    return permission_for(user_id, database_id) is not None


def is_owner(user_id, database_id):
    return permission_for(user_id, database_id) is Permission.OWNER


def require_relation(user_id, database_id):
    if not has_any_relation(user_id, database_id):
        logger.warning("User %s has no access to database %s", user_id, database_id)
        raise PermissionDenied(ErrorCode.USER_NOT_OWNER)


def require_owner(user_id, database_id):
    if not is_owner(user_id, database_id):
        logger.warning("User %s is not an owner of database %s", user_id, database_id)
        raise PermissionDenied(ErrorCode.USER_NOT_OWNER)


def require_database(database_id):
    database = db.session.get(Database, database_id)
    if database is None:
        raise NotFound(ErrorCode.DATABASE_NOT_EXIST)
    return database


def resolve_post(post_id):
    """Load a post; a post that cannot be found never passes a permission check."""
    post = db.session.get(Post, post_id)
    if post is None:
        raise NotFound(ErrorCode.POST_NOT_EXIST)
    return post


def require_post_reader(user_id, post_id):
    post = resolve_post(post_id)
    require_relation(user_id, post.database_id)
    return post


def require_post_writer(user_id, post_id):
    post = resolve_post(post_id)
    require_owner(user_id, post.database_id)
    return post
