# -*- coding: utf-8 -*-
"""
Form validation.

A ``FormValidator`` runs a chain of checks per field and collects the
results into the request's error/value bag. A check is a callable that
receives the trimmed value and returns ``None`` when the value passes or
a ``FieldError`` describing the failure. Only the first failing check of
a field is recorded; other fields are still validated.

Usage:
    ```python
    form = FormValidator(request.get_json(), ctx)
    form.validate("title", required())
    form.validate("password", required(), min_length(8, "Too short", clear=True))
    if form.success():
        ...
    ```
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional

from flask import current_app, jsonify

from knowledge_manager.errors import DomainError

GENERAL = "general"

REQUIRED_MESSAGE = "This field is required"
RATE_LIMIT_MESSAGE = "Too many failed attempts. Please wait a moment before trying again."
UNEXPECTED_MESSAGE = "Something went wrong, please try again"


@dataclass(frozen=True)
class FieldError:
    """
    Failure of a single field check.

    Attributes:
        message (str): Message shown next to the field.
        clear (bool): Blank the echoed value, for input that must not be
            sent back (e.g. a rejected password).
    """

    message: str
    clear: bool = False


Check = Callable[[str], Optional[FieldError]]


def required(message=REQUIRED_MESSAGE):
    def check(value):
        if not value:
            return FieldError(message)
    return check


def min_length(length, message, clear=False):
    def check(value):
        if len(value) < length:
            return FieldError(message, clear)
    return check


def max_length(length, message, clear=False):
    def check(value):
        if len(value) > length:
            return FieldError(message, clear)
    return check


def forbids(substring, message, clear=False):
    def check(value):
        if substring in value:
            return FieldError(message, clear)
    return check


def matches(pattern, message):
    compiled = re.compile(pattern)

    def check(value):
        if not compiled.match(value):
            return FieldError(message)
    return check


def max_words(count, message):
    def check(value):
        if len(value.split()) > count:
            return FieldError(message)
    return check


def max_word_length(length, message):
    def check(value):
        if any(len(word) > length for word in value.split()):
            return FieldError(message)
    return check


class FormValidator:
    """
    Collects per-field validation results into a request context.

    The validator writes into ``ctx.errors`` and ``ctx.values`` by
    reference, so a second pass (mapping a store error onto fields after
    a successful first pass) lands in the same bag.

    Fields named in ``secret`` are validated normally but always echoed
    back blank, whatever the outcome of the submission.
    """

    def __init__(self, params, ctx, secret=()):
        self.params = params or {}
        self.ctx = ctx
        self.secret = frozenset(secret)

    @property
    def errors(self):
        return self.ctx.errors

    @property
    def values(self):
        return self.ctx.values

    def validate(self, key, *checks):
        """Record the trimmed value of ``key`` and run its checks in order."""
        raw = self.params.get(key)
        value = "" if raw is None else str(raw).strip()
        self.values[key] = "" if key in self.secret else value
        for check in checks:
            result = check(value)
            if result is not None:
                self.error(key, result)
                break
        return value

    def error(self, key, result, clear_all_first=False):
        """Record ``result`` against ``key``, optionally dropping earlier errors."""
        if clear_all_first:
            self.errors.clear()
        if result.clear:
            self.values[key] = ""
        self.errors[key] = result.message

    def map_error(self, exc, mapping):
        """
        Convert a raised domain error into field messages.

        Args:
            exc (Exception): Error raised by the store.
            mapping (dict): ``ErrorCode -> (field, message, clear)``.
        """
        if not isinstance(exc, DomainError):
            current_app.logger.error("Unexpected error while handling form", exc_info=exc)
            self.error(GENERAL, FieldError(UNEXPECTED_MESSAGE))
            return
        for code in exc.codes:
            if code in mapping:
                key, message, clear = mapping[code]
                self.error(key, FieldError(message, clear))
            else:
                self.error(GENERAL, FieldError(UNEXPECTED_MESSAGE))

    def success(self):
        return not self.errors


def form_response(form, rate_limiter, status_code=400):
    """
    Answer a failed form submission.

    Counts the failure against the client; once the limit is exceeded the
    rate-limit message replaces every other error.
    """
    rate_limiter.record_failure()
    if rate_limiter.limit_exceeded():
        current_app.logger.warning("Rate limit exceeded for %s", rate_limiter.key)
        form.error(GENERAL, FieldError(RATE_LIMIT_MESSAGE), clear_all_first=True)
        status_code = 429
    return jsonify({"errors": dict(form.errors), "values": dict(form.values)}), status_code
