# -*- coding: utf-8 -*-
"""
Tag store operations.

Tags are global: "python", "Python" and "PYTHON" are one row, keyed by
the canonical title. Which tags a post or a database uses is always
answered through the junction tables, never by title.
"""

import logging

from sqlalchemy import delete

from knowledge_manager.database import insert_or_ignore, transaction
from knowledge_manager.databases.models import Database, Permission, UserDatabaseRel
from knowledge_manager.errors import ErrorCode, NotFound, PermissionDenied
from knowledge_manager.extensions import db
from knowledge_manager.permissions import require_post_writer
from knowledge_manager.post.models import Post
from knowledge_manager.tag.models import PostTagRel, Tag, TagDatabaseRel

logger = logging.getLogger(__name__)


def canonicalize(raw_title):
    """Split on whitespace, capitalize each word and rejoin with single spaces."""
    return " ".join(word.capitalize() for word in raw_title.split())


def _tag_id_for(title):
    insert_or_ignore(Tag, ["title"], title=title)
    return db.session.execute(db.select(Tag.id).where(Tag.title == title)).scalar_one()


def get_or_create_tag(raw_title):
    """
    Return the id of the tag for ``raw_title``, creating it if needed.

    Concurrent callers racing on the same canonical title all get the id
    of the single surviving row.
    """
    title = canonicalize(raw_title)
    if not title:
        raise ValueError("tag title is empty")
    with transaction():
        tag_id = _tag_id_for(title)
    return tag_id


def link_tags(post_id, database_id, tag_titles):
    """
    Attach tags to a post and record them on its database.

    Runs inside the caller's transaction; linking the same tag twice is
    a no-op.
    """
    titles = [canonicalize(raw) for raw in tag_titles]
    for title in dict.fromkeys(t for t in titles if t):
        tag_id = _tag_id_for(title)
        insert_or_ignore(PostTagRel, ["post_id", "tag_id"], post_id=post_id, tag_id=tag_id)
        insert_or_ignore(TagDatabaseRel, ["database_id", "tag_id"], database_id=database_id, tag_id=tag_id)


def attach_tags(post_id, database_id, tag_titles, acting_user_id):
    """
    Attach every title in ``tag_titles`` to the post, all or nothing.

    Raises:
        NotFound: the post does not exist or lives in another database.
        PermissionDenied: the acting user does not own the post's database.
    """
    post = require_post_writer(acting_user_id, post_id)
    if post.database_id != int(database_id):
        raise NotFound(ErrorCode.POST_NOT_EXIST)
    with transaction():
        link_tags(post.id, post.database_id, tag_titles)


def get_tag(tag_id):
    tag = db.session.get(Tag, tag_id)
    if tag is None:
        raise NotFound(ErrorCode.TAG_NOT_EXIST)
    return tag


def list_tags_for_post(post_id):
    return (
        Tag.query.join(PostTagRel, PostTagRel.tag_id == Tag.id)
        .filter(PostTagRel.post_id == post_id)
        .order_by(Tag.id)
        .all()
    )


def list_tags_for_database(user_id):
    """
    Tags known in any database the user has access to.

    Returns:
        list[dict]: ``{"tag": Tag, "database": Database}``, one entry per
        (tag, database) pair.
    """
    rows = (
        db.session.query(Tag, Database)
        .join(TagDatabaseRel, TagDatabaseRel.tag_id == Tag.id)
        .join(Database, Database.id == TagDatabaseRel.database_id)
        .join(UserDatabaseRel, UserDatabaseRel.database_id == Database.id)
        .filter(UserDatabaseRel.user_id == user_id)
        .order_by(Database.id, Tag.id)
        .all()
    )
    return [{"tag": tag, "database": database} for tag, database in rows]


def list_posts_for_tag(tag_id, user_id=None):
    """
    Posts carrying the tag, each with all of its tags.

    When ``user_id`` is given only posts from databases the user can
    access are returned.
    """
    query = Post.query.join(PostTagRel, PostTagRel.post_id == Post.id).filter(PostTagRel.tag_id == tag_id)
    if user_id is not None:
        query = query.join(UserDatabaseRel, UserDatabaseRel.database_id == Post.database_id).filter(
            UserDatabaseRel.user_id == user_id
        )
    posts = {post.id: {"post": post, "tags": []} for post in query.order_by(Post.id).all()}
    if not posts:
        return []

    rows = (
        db.session.query(PostTagRel.post_id, Tag)
        .join(Tag, Tag.id == PostTagRel.tag_id)
        .filter(PostTagRel.post_id.in_(list(posts)))
        .order_by(Tag.id)
        .all()
    )
    for post_id, tag in rows:
        posts[post_id]["tags"].append(tag)
    return list(posts.values())


def remove_tag_from_post(tag_id, post_id, acting_user_id):
    """Detach a tag from a post; detaching a tag that is not attached is fine."""
    require_post_writer(acting_user_id, post_id)
    with transaction() as session:
        session.execute(delete(PostTagRel).where(PostTagRel.tag_id == tag_id, PostTagRel.post_id == post_id))


def delete_tag(tag_id, acting_user_id):
    """
    Delete a tag and every link to it.

    Raises:
        NotFound: the tag does not exist.
        PermissionDenied: the acting user owns no database using the tag.
    """
    get_tag(tag_id)
    owned_link = (
        db.session.query(TagDatabaseRel.id)
        .join(UserDatabaseRel, UserDatabaseRel.database_id == TagDatabaseRel.database_id)
        .filter(
            TagDatabaseRel.tag_id == tag_id,
            UserDatabaseRel.user_id == acting_user_id,
            UserDatabaseRel.permission_type == Permission.OWNER.value,
        )
        .first()
    )
    if owned_link is None:
        logger.warning("User %s may not delete tag %s", acting_user_id, tag_id)
        raise PermissionDenied(ErrorCode.USER_NOT_OWNER)

    with transaction() as session:
        session.execute(delete(PostTagRel).where(PostTagRel.tag_id == tag_id))
        session.execute(delete(TagDatabaseRel).where(TagDatabaseRel.tag_id == tag_id))
        session.execute(delete(Tag).where(Tag.id == tag_id))
    logger.info("User %s deleted tag %s", acting_user_id, tag_id)
