from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from knowledge_manager.context import build_context
from knowledge_manager.databases.models import NAME_MAX_LENGTH
from knowledge_manager.databases.service import (
    add_viewer_by_email,
    create_database,
    delete_database,
    list_databases_for_user,
    list_owned_databases,
    remove_viewer,
)
from knowledge_manager.errors import DomainError, ErrorCode
from knowledge_manager.forms import GENERAL, FormValidator, form_response, max_length, required
from knowledge_manager.rate_limiter import RateLimiter

blueprint = Blueprint("databases", __name__, url_prefix="/databases")

DATABASE_ERRORS = {
    ErrorCode.USER_NOT_OWNER: (GENERAL, "Only an owner of the database can do that", False),
    ErrorCode.DATABASE_NOT_EXIST: (GENERAL, "The database does not exist", False),
    ErrorCode.USER_NOT_EXIST: ("email", "No user is registered with that email address", False),
    ErrorCode.USER_ALREADY_IN_DATABASE: ("email", "That user already has access to the database", False),
}


def _post_summary(post):
    return {"id": post.id, "title": post.title}


# ---------------------------
# List databases the current user can access, with their posts
# ---------------------------
@blueprint.route("/", methods=["GET"])
@jwt_required()
def list_databases():
    ctx = build_context()
    entries = list_databases_for_user(ctx.user_id)
    return jsonify([
        {
            **entry["database"].to_dict(),
            "permission_type": entry["permission_type"].value,
            "posts": [_post_summary(p) for p in entry["posts"]],
        }
        for entry in entries
    ]), 200


# ---------------------------
# Create a database owned by the current user
# ---------------------------
@blueprint.route("/", methods=["POST"])
@jwt_required()
def add_database():
    ctx = build_context()
    limiter = RateLimiter.from_config(ctx, "FORM")
    form = FormValidator(request.get_json(silent=True), ctx)

    name = form.validate(
        "name",
        required(),
        max_length(NAME_MAX_LENGTH, f"The name may be at most {NAME_MAX_LENGTH} characters"),
    )
    if not form.success():
        return form_response(form, limiter)

    database_id = create_database(ctx.user_id, name)
    return jsonify({"id": database_id, "name": name}), 201


# ---------------------------
# Databases owned by the current user with their viewers
# ---------------------------
@blueprint.route("/owned", methods=["GET"])
@jwt_required()
def owned_databases():
    ctx = build_context()
    return jsonify([
        {
            **entry["database"].to_dict(),
            "viewers": [
                {**viewer, "permission_type": viewer["permission_type"].value}
                for viewer in entry["viewers"]
            ],
        }
        for entry in list_owned_databases(ctx.user_id)
    ]), 200


# ---------------------------
# Delete a database (owners only)
# ---------------------------
@blueprint.route("/<int:database_id>", methods=["DELETE"])
@jwt_required()
def remove_database(database_id):
    ctx = build_context()
    limiter = RateLimiter.from_config(ctx, "FORM")
    form = FormValidator({}, ctx)
    try:
        delete_database(database_id, ctx.user_id)
    except DomainError as e:
        form.map_error(e, DATABASE_ERRORS)
        return form_response(form, limiter, e.status_code)
    return jsonify({"msg": "Database deleted"}), 200


# ---------------------------
# Give another user viewer access by email
# ---------------------------
@blueprint.route("/<int:database_id>/viewers", methods=["POST"])
@jwt_required()
def add_viewer(database_id):
    ctx = build_context()
    limiter = RateLimiter.from_config(ctx, "FORM")
    form = FormValidator(request.get_json(silent=True), ctx)

    email = form.validate("email", required())
    if not form.success():
        return form_response(form, limiter)

    try:
        user = add_viewer_by_email(database_id, email, ctx.user_id)
    except DomainError as e:
        form.map_error(e, DATABASE_ERRORS)
        return form_response(form, limiter, e.status_code)
    return jsonify(user.to_public_dict()), 201


# ---------------------------
# Revoke a viewer's access
# ---------------------------
@blueprint.route("/<int:database_id>/viewers/<int:user_id>", methods=["DELETE"])
@jwt_required()
def delete_viewer(database_id, user_id):
    ctx = build_context()
    limiter = RateLimiter.from_config(ctx, "FORM")
    form = FormValidator({}, ctx)
    try:
        remove_viewer(database_id, user_id, ctx.user_id)
    except DomainError as e:
        form.map_error(e, DATABASE_ERRORS)
        return form_response(form, limiter, e.status_code)
    return jsonify({"msg": "Viewer removed"}), 200
