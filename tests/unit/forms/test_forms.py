from knowledge_manager.context import RequestContext
from knowledge_manager.errors import Conflict, ErrorCode
from knowledge_manager.forms import (
    GENERAL,
    FieldError,
    FormValidator,
    forbids,
    matches,
    max_length,
    max_word_length,
    max_words,
    min_length,
    required,
)


def make_form(params):
    ctx = RequestContext(user_id=None, client_ip="127.0.0.1")
    return FormValidator(params, ctx), ctx


def test_validate_trims_and_records_values():
    form, ctx = make_form({"title": "  Hello  "})
    value = form.validate("title", required())
    assert value == "Hello"
    assert ctx.values == {"title": "Hello"}
    assert form.success()


def test_plain_failure_keeps_value():
    form, ctx = make_form({"tags": "foo_bar"})
    form.validate("tags", required(), matches(r"^[^\W_]+$", "letters only"))
    assert ctx.errors == {"tags": "letters only"}
    assert ctx.values["tags"] == "foo_bar"
    assert not form.success()


def test_clearing_failure_blanks_value():
    form, ctx = make_form({"password": "short", "name": "alice"})
    form.validate("name", required())
    form.validate("password", required(), min_length(8, "too short", clear=True))
    assert ctx.errors == {"password": "too short"}
    assert ctx.values == {"name": "alice", "password": ""}


def test_only_first_failure_per_field_is_recorded():
    form, ctx = make_form({"name": ""})
    form.validate("name", required("missing"), forbids("@", "no at", clear=True))
    assert ctx.errors == {"name": "missing"}


def test_fields_are_validated_independently():
    form, ctx = make_form({"title": "", "content": "", "tags": "a b c"})
    form.validate("title", required())
    form.validate("content", required())
    form.validate("tags", max_words(2, "too many"))
    assert set(ctx.errors) == {"title", "content", "tags"}


def test_missing_param_is_treated_as_empty():
    form, ctx = make_form(None)
    form.validate("title", required())
    assert ctx.values == {"title": ""}
    assert "title" in ctx.errors


def test_error_with_clear_all_first_supersedes_field_errors():
    form, ctx = make_form({"title": ""})
    form.validate("title", required())
    form.error(GENERAL, FieldError("slow down"), clear_all_first=True)
    assert ctx.errors == {GENERAL: "slow down"}
    assert ctx.values == {"title": ""}


def test_map_error_routes_codes_to_fields(app):
    form, ctx = make_form({"name": "alice", "email": "a@x.com"})
    form.validate("name", required())
    form.validate("email", required())
    assert form.success()

    mapping = {
        ErrorCode.CONFLICT_NAME: ("name", "name taken", True),
        ErrorCode.CONFLICT_EMAIL: ("email", "email taken", True),
    }
    form.map_error(Conflict(ErrorCode.CONFLICT_NAME, ErrorCode.CONFLICT_EMAIL), mapping)
    assert ctx.errors == {"name": "name taken", "email": "email taken"}
    assert ctx.values == {"name": "", "email": ""}


def test_map_error_unmapped_code_goes_to_general(app):
    form, ctx = make_form({})
    form.map_error(Conflict(ErrorCode.USER_ALREADY_IN_DATABASE), {})
    assert list(ctx.errors) == [GENERAL]


def test_map_error_unexpected_exception_goes_to_general(app):
    form, ctx = make_form({})
    form.map_error(RuntimeError("boom"), {})
    assert list(ctx.errors) == [GENERAL]


def test_secret_fields_are_never_echoed():
    ctx = RequestContext(user_id=None, client_ip="127.0.0.1")
    form = FormValidator({"email": "a@b.c", "password": "hunter22"}, ctx, secret=("password",))
    assert form.validate("password", required()) == "hunter22"
    form.validate("email", required())
    form.error(GENERAL, FieldError("Wrong email or password"))
    assert ctx.values == {"email": "a@b.c", "password": ""}


def test_length_checks():
    form, ctx = make_form({"title": "abcdef", "tags": "short waytoolong"})
    form.validate("title", max_length(5, "too long"))
    form.validate("tags", max_word_length(8, "tag too long"))
    assert ctx.errors == {"title": "too long", "tags": "tag too long"}
    assert ctx.values["title"] == "abcdef"

    form, ctx = make_form({"title": "abcde", "tags": "short words"})
    form.validate("title", max_length(5, "too long"))
    form.validate("tags", max_word_length(8, "tag too long"))
    assert form.success()
