# -*- coding: utf-8 -*-
"""
Database store operations.

Creating a database also creates its owner relation, and deleting one
removes every post, tag link and access relation under it. Both run in
a single transaction.
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from knowledge_manager.database import transaction
from knowledge_manager.databases.models import Database, Permission, UserDatabaseRel
from knowledge_manager.errors import Conflict, ErrorCode, NotFound
from knowledge_manager.extensions import db
from knowledge_manager.permissions import require_owner
from knowledge_manager.post.models import Post
from knowledge_manager.tag.models import PostTagRel, TagDatabaseRel
from knowledge_manager.user.models import User

logger = logging.getLogger(__name__)


def create_database(owner_id, name):
    """Create a database owned by ``owner_id`` and return its id."""
    with transaction() as session:
        database = Database(name=name)
        session.add(database)
        session.flush()
        session.add(
            UserDatabaseRel(
                user_id=owner_id,
                database_id=database.id,
                permission_type=Permission.OWNER.value,
            )
        )
    logger.info("User %s created database %s", owner_id, database.id)
    return database.id


def list_databases_for_user(user_id):
    """
    Every database the user has a relation to, with its posts.

    Returns:
        list[dict]: ``{"database": Database, "permission_type": Permission,
        "posts": list[Post]}`` in creation order.
    """
    rows = (
        db.session.query(Database, UserDatabaseRel.permission_type)
        .join(UserDatabaseRel, UserDatabaseRel.database_id == Database.id)
        .filter(UserDatabaseRel.user_id == user_id)
        .order_by(Database.id)
        .all()
    )
    result = {
        database.id: {"database": database, "permission_type": Permission(permission), "posts": []}
        for database, permission in rows
    }
    if result:
        posts = Post.query.filter(Post.database_id.in_(list(result))).order_by(Post.id).all()
        for post in posts:
            result[post.database_id]["posts"].append(post)
    return list(result.values())


def list_database_viewers(database_id):
    """
    Users holding viewer access to the database.

    Returns:
        list[dict]: ``{"user_id": int, "email": str, "permission_type":
        Permission}`` ordered by user id.
    """
    rows = (
        db.session.query(User.id, User.email, UserDatabaseRel.permission_type)
        .join(UserDatabaseRel, UserDatabaseRel.user_id == User.id)
        .filter(
            UserDatabaseRel.database_id == database_id,
            UserDatabaseRel.permission_type == Permission.VIEWER.value,
        )
        .order_by(User.id)
        .all()
    )
    return [
        {"user_id": user_id, "email": email, "permission_type": Permission(permission)}
        for user_id, email, permission in rows
    ]


def list_owned_databases(user_id):
    """Databases the user owns, each with its viewer roster."""
    owned = (
        Database.query.join(UserDatabaseRel, UserDatabaseRel.database_id == Database.id)
        .filter(
            UserDatabaseRel.user_id == user_id,
            UserDatabaseRel.permission_type == Permission.OWNER.value,
        )
        .order_by(Database.id)
        .all()
    )
    return [{"database": database, "viewers": list_database_viewers(database.id)} for database in owned]


def delete_database(database_id, acting_user_id):
    """
    Delete a database and everything that references it.

    Raises:
        PermissionDenied: ``acting_user_id`` is not an owner; nothing is deleted.
    """
    require_owner(acting_user_id, database_id)

    post_ids = select(Post.id).where(Post.database_id == database_id)
    with transaction() as session:
        session.execute(delete(PostTagRel).where(PostTagRel.post_id.in_(post_ids)))
        session.execute(delete(Post).where(Post.database_id == database_id))
        session.execute(delete(TagDatabaseRel).where(TagDatabaseRel.database_id == database_id))
        session.execute(delete(UserDatabaseRel).where(UserDatabaseRel.database_id == database_id))
        session.execute(delete(Database).where(Database.id == database_id))
    logger.info("User %s deleted database %s", acting_user_id, database_id)


def add_viewer_by_email(database_id, email, acting_user_id):
    """
    Give the user registered under ``email`` viewer access.

    Returns:
        User: The added user.

    Raises:
        PermissionDenied: the acting user is not an owner.
        NotFound: ``userNotExist`` when no user has that email.
        Conflict: ``userAlreadyInDatabase`` when the user already has access.
    """
    require_owner(acting_user_id, database_id)

    user = User.query.filter_by(email=email).first()
    if user is None:
        raise NotFound(ErrorCode.USER_NOT_EXIST)

    existing = UserDatabaseRel.query.filter_by(user_id=user.id, database_id=database_id).first()
    if existing is not None:
        raise Conflict(ErrorCode.USER_ALREADY_IN_DATABASE)

    try:
        with transaction() as session:
            session.add(
                UserDatabaseRel(
                    user_id=user.id,
                    database_id=database_id,
                    permission_type=Permission.VIEWER.value,
                )
            )
    except IntegrityError:
        raise Conflict(ErrorCode.USER_ALREADY_IN_DATABASE)
    logger.info("User %s added viewer %s to database %s", acting_user_id, user.id, database_id)
    return user


def remove_viewer(database_id, target_user_id, acting_user_id):
    """Revoke a viewer's access. Owner relations are never touched here."""
    require_owner(acting_user_id, database_id)

    with transaction() as session:
        session.execute(
            delete(UserDatabaseRel).where(
                UserDatabaseRel.database_id == database_id,
                UserDatabaseRel.user_id == target_user_id,
                UserDatabaseRel.permission_type == Permission.VIEWER.value,
            )
        )
    logger.info("User %s removed viewer %s from database %s", acting_user_id, target_user_id, database_id)
