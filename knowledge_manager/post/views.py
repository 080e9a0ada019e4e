from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from knowledge_manager.context import build_context
from knowledge_manager.errors import DomainError, ErrorCode
from knowledge_manager.forms import (
    GENERAL,
    FormValidator,
    form_response,
    matches,
    max_length,
    max_word_length,
    max_words,
    required,
)
from knowledge_manager.post.models import TITLE_MAX_LENGTH
from knowledge_manager.post.service import create_post, delete_post, edit_post, get_post_with_tags
from knowledge_manager.rate_limiter import RateLimiter
from knowledge_manager.tag.models import TITLE_MAX_LENGTH as TAG_MAX_LENGTH

blueprint = Blueprint("post", __name__, url_prefix="/posts")

MAX_TAGS = 10
TITLE_LENGTH_CHECK = max_length(TITLE_MAX_LENGTH, f"The title may be at most {TITLE_MAX_LENGTH} characters")

POST_ERRORS = {
    ErrorCode.USER_NOT_OWNER: (GENERAL, "Only an owner of the database can change its posts", False),
    ErrorCode.POST_NOT_EXIST: (GENERAL, "The post does not exist", False),
    ErrorCode.DATABASE_NOT_EXIST: ("database_id", "The database does not exist", False),
}


def validate_tags(form):
    """Space separated tag titles made of letters, digits and spaces."""
    tags = form.validate(
        "tags",
        required(),
        matches(r"^[^\W_]+(?: +[^\W_]+)*$", "Tags may only contain letters, digits and spaces"),
        max_words(MAX_TAGS, f"A post can have at most {MAX_TAGS} tags"),
        max_word_length(TAG_MAX_LENGTH, f"A tag may be at most {TAG_MAX_LENGTH} characters"),
    )
    return tags.split()


# ---------------------------
# Create a post with its tags
# ---------------------------
@blueprint.route("/", methods=["POST"])
@jwt_required()
def add_post():
    """
    Expected JSON body:
    {"title": "...", "content": "...", "tags": "foo bar", "database_id": 1}
    """
    ctx = build_context()
    limiter = RateLimiter.from_config(ctx, "FORM")
    form = FormValidator(request.get_json(silent=True), ctx)

    title = form.validate("title", required(), TITLE_LENGTH_CHECK)
    content = form.validate("content", required())
    tags = validate_tags(form)
    database_id = form.validate("database_id", required(), matches(r"^\d+$", "Invalid database id"))

    if not form.success():
        return form_response(form, limiter)

    try:
        post_id = create_post(title, content, int(database_id), ctx.user_id, tags=tags)
    except DomainError as e:
        form.map_error(e, POST_ERRORS)
        return form_response(form, limiter, e.status_code)
    return jsonify({"id": post_id}), 201


# ---------------------------
# Get a post and its tags
# ---------------------------
@blueprint.route("/<int:post_id>", methods=["GET"])
@jwt_required()
def view_post(post_id):
    ctx = build_context()
    try:
        post, tags = get_post_with_tags(post_id, ctx.user_id)
    except DomainError as e:
        return jsonify({"code": e.code.value, "msg": "Post not found or no permission"}), e.status_code
    return jsonify({**post.to_dict(), "tags": [tag.to_dict() for tag in tags]}), 200


# ---------------------------
# Edit a post's title and content
# ---------------------------
@blueprint.route("/<int:post_id>", methods=["PUT"])
@jwt_required()
def update_post(post_id):
    ctx = build_context()
    limiter = RateLimiter.from_config(ctx, "FORM")
    form = FormValidator(request.get_json(silent=True), ctx)

    title = form.validate("title", required(), TITLE_LENGTH_CHECK)
    content = form.validate("content", required())
    if not form.success():
        return form_response(form, limiter)

    try:
        edit_post(post_id, title, content, ctx.user_id)
    except DomainError as e:
        form.map_error(e, POST_ERRORS)
        return form_response(form, limiter, e.status_code)
    return jsonify({"msg": "Post updated"}), 200


# ---------------------------
# Delete a post and its tag links
# ---------------------------
@blueprint.route("/<int:post_id>", methods=["DELETE"])
@jwt_required()
def remove_post(post_id):
    ctx = build_context()
    limiter = RateLimiter.from_config(ctx, "FORM")
    form = FormValidator({}, ctx)
    try:
        delete_post(post_id, ctx.user_id)
    except DomainError as e:
        form.map_error(e, POST_ERRORS)
        return form_response(form, limiter, e.status_code)
    return jsonify({"msg": "Post deleted"}), 200
