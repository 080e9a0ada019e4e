from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from knowledge_manager.context import build_context
from knowledge_manager.errors import DomainError, ErrorCode
from knowledge_manager.forms import GENERAL, FormValidator, form_response, matches, max_length, required
from knowledge_manager.rate_limiter import RateLimiter
from knowledge_manager.tag.models import TITLE_MAX_LENGTH
from knowledge_manager.tag.service import (
    attach_tags,
    delete_tag,
    get_tag,
    list_posts_for_tag,
    list_tags_for_database,
    remove_tag_from_post,
)

blueprint = Blueprint("tag", __name__, url_prefix="/tags")

TAG_ERRORS = {
    ErrorCode.USER_NOT_OWNER: (GENERAL, "Only an owner of the database can change its tags", False),
    ErrorCode.POST_NOT_EXIST: ("post_id", "The post does not exist", False),
    ErrorCode.TAG_NOT_EXIST: ("tag_id", "The tag does not exist", False),
}


# ---------------------------
# List all tags of the databases the current user can access
# ---------------------------
@blueprint.route("/", methods=["GET"])
@jwt_required()
def list_tags():
    ctx = build_context()
    return jsonify([
        {**entry["tag"].to_dict(), "database_id": entry["database"].id, "database_name": entry["database"].name}
        for entry in list_tags_for_database(ctx.user_id)
    ]), 200


# ---------------------------
# Attach a tag to a post (creates the tag if it does not exist yet)
# ---------------------------
@blueprint.route("/", methods=["POST"])
@jwt_required()
def add_tag():
    """
    Expected JSON body: {"title": "...", "post_id": 1, "database_id": 1}
    """
    ctx = build_context()
    limiter = RateLimiter.from_config(ctx, "FORM")
    form = FormValidator(request.get_json(silent=True), ctx)

    title = form.validate(
        "title",
        required(),
        max_length(TITLE_MAX_LENGTH, f"A tag may be at most {TITLE_MAX_LENGTH} characters"),
    )
    post_id = form.validate("post_id", required("No post id given"), matches(r"^\d+$", "Invalid post id"))
    database_id = form.validate(
        "database_id", required("No database id given"), matches(r"^\d+$", "Invalid database id")
    )
    if not form.success():
        return form_response(form, limiter)

    try:
        attach_tags(int(post_id), int(database_id), [title], ctx.user_id)
    except DomainError as e:
        form.map_error(e, TAG_ERRORS)
        return form_response(form, limiter, e.status_code)
    return jsonify({"msg": "Tag added"}), 200


# ---------------------------
# A tag and the posts carrying it that the current user can see
# ---------------------------
@blueprint.route("/<int:tag_id>", methods=["GET"])
@jwt_required()
def view_tag(tag_id):
    ctx = build_context()
    try:
        tag = get_tag(tag_id)
    except DomainError as e:
        return jsonify({"code": e.code.value, "msg": "Tag not found"}), e.status_code
    posts = list_posts_for_tag(tag_id, ctx.user_id)
    return jsonify({
        **tag.to_dict(),
        "posts": [
            {
                "id": entry["post"].id,
                "title": entry["post"].title,
                "content": entry["post"].content,
                "tags": [t.to_dict() for t in entry["tags"]],
            }
            for entry in posts
        ],
    }), 200


# ---------------------------
# Delete a tag everywhere
# ---------------------------
@blueprint.route("/<int:tag_id>", methods=["DELETE"])
@jwt_required()
def remove_tag(tag_id):
    ctx = build_context()
    limiter = RateLimiter.from_config(ctx, "FORM")
    form = FormValidator({}, ctx)
    try:
        delete_tag(tag_id, ctx.user_id)
    except DomainError as e:
        form.map_error(e, TAG_ERRORS)
        return form_response(form, limiter, e.status_code)
    return jsonify({"msg": "Tag deleted"}), 200


# ---------------------------
# Remove a tag from one post
# ---------------------------
@blueprint.route("/<int:tag_id>/posts/<int:post_id>", methods=["DELETE"])
@jwt_required()
def remove_tag_from_post_view(tag_id, post_id):
    ctx = build_context()
    limiter = RateLimiter.from_config(ctx, "FORM")
    form = FormValidator({}, ctx)
    try:
        remove_tag_from_post(tag_id, post_id, ctx.user_id)
    except DomainError as e:
        form.map_error(e, TAG_ERRORS)
        return form_response(form, limiter, e.status_code)
    return jsonify({"msg": "Tag removed from post"}), 200
