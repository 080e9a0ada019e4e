# -*- coding: utf-8 -*-
"""Post store operations."""

import logging

from sqlalchemy import delete

from knowledge_manager.database import transaction
from knowledge_manager.permissions import require_database, require_owner, require_post_reader, require_post_writer
from knowledge_manager.post.models import Post
from knowledge_manager.tag.models import PostTagRel
from knowledge_manager.tag.service import link_tags, list_tags_for_post

logger = logging.getLogger(__name__)


def create_post(title, content, database_id, acting_user_id, tags=()):
    """
    Create a post in a database the acting user owns.

    Tags given in ``tags`` are attached in the same transaction, so the
    post never exists without them.

    Returns:
        int: The new post's id.
    """
    require_database(database_id)
    require_owner(acting_user_id, database_id)
    with transaction() as session:
        post = Post(title=title, content=content, database_id=database_id)
        session.add(post)
        session.flush()
        link_tags(post.id, database_id, tags)
    logger.info("User %s created post %s in database %s", acting_user_id, post.id, database_id)
    return post.id


def get_post(post_id, acting_user_id):
    """Return the post if the acting user can read its database."""
    return require_post_reader(acting_user_id, post_id)


def get_post_with_tags(post_id, acting_user_id):
    post = get_post(post_id, acting_user_id)
    return post, list_tags_for_post(post.id)


def edit_post(post_id, title, content, acting_user_id):
    post = require_post_writer(acting_user_id, post_id)
    with transaction():
        post.title = title
        post.content = content


def delete_post(post_id, acting_user_id):
    """Delete a post together with its tag links."""
    require_post_writer(acting_user_id, post_id)
    with transaction() as session:
        session.execute(delete(PostTagRel).where(PostTagRel.post_id == post_id))
        session.execute(delete(Post).where(Post.id == post_id))
    logger.info("User %s deleted post %s", acting_user_id, post_id)
