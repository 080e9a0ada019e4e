from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import create_access_token

from knowledge_manager.context import build_context
from knowledge_manager.errors import ErrorCode
from knowledge_manager.extensions import bcrypt
from knowledge_manager.forms import (
    GENERAL,
    FieldError,
    FormValidator,
    forbids,
    form_response,
    max_length,
    min_length,
    required,
)
from knowledge_manager.rate_limiter import RateLimiter
from knowledge_manager.user.models import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH
from knowledge_manager.user.service import create_user, get_user_by_identifier

blueprint = Blueprint("user", __name__, url_prefix="/users")

SIGNUP_CONFLICTS = {
    ErrorCode.CONFLICT_NAME: ("name", "That name is already taken", True),
    ErrorCode.CONFLICT_EMAIL: ("email", "That email address is already taken", True),
}


@blueprint.route("/register", methods=["POST"])
def register():
    """
    Register a user and return a JWT for it.

    Expected JSON body: {"name": "...", "email": "...", "password": "..."}
    """
    ctx = build_context()
    limiter = RateLimiter.from_config(ctx, "SIGNUP", scope="signup")
    form = FormValidator(request.get_json(silent=True), ctx, secret=("password",))

    form.validate(
        "name",
        required(),
        forbids("@", "The name may not contain @", clear=True),
        max_length(NAME_MAX_LENGTH, f"The name may be at most {NAME_MAX_LENGTH} characters"),
    )
    form.validate(
        "email",
        required(),
        max_length(EMAIL_MAX_LENGTH, f"The email address may be at most {EMAIL_MAX_LENGTH} characters"),
    )
    password = form.validate(
        "password", required(), min_length(8, "The password must be at least 8 characters", clear=True)
    )

    if not form.success():
        return form_response(form, limiter)

    digest = bcrypt.generate_password_hash(password).decode("utf-8")
    try:
        user_id = create_user(form.values["name"], form.values["email"], digest)
    except Exception as e:
        form.map_error(e, SIGNUP_CONFLICTS)
        return form_response(form, limiter)

    ctx.clear()
    return jsonify(access_token=create_access_token(identity=str(user_id)), user_id=user_id), 200


@blueprint.route("/login", methods=["POST"])
def login():
    """
    Exchange an email (or name) and password for a JWT.

    Expected JSON body: {"email": "...", "password": "..."}
    """
    ctx = build_context()
    limiter = RateLimiter.from_config(ctx, "LOGIN", scope="login")
    form = FormValidator(request.get_json(silent=True), ctx, secret=("password",))

    identifier = form.validate("email", required())
    password = form.validate("password", required())

    if form.success():
        user = get_user_by_identifier(identifier)
        if user and user.check_password(password):
            ctx.clear()
            return jsonify(access_token=create_access_token(identity=str(user.id))), 200
        current_app.logger.warning("Incorrect login for %s", identifier)
        form.error(GENERAL, FieldError("Wrong email or password"))

    return form_response(form, limiter)
