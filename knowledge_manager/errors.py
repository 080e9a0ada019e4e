# -*- coding: utf-8 -*-
"""
Domain errors raised by the store and the access guard.

Services never format user-facing text; they raise one of the
exceptions below carrying one or more ``ErrorCode`` tags, and the
form layer turns those tags into field messages.
"""

import enum


class ErrorCode(str, enum.Enum):
    USER_NOT_OWNER = "userNotOwner"
    USER_NOT_EXIST = "userNotExist"
    USER_ALREADY_IN_DATABASE = "userAlreadyInDatabase"
    CONFLICT_NAME = "conflict:name"
    CONFLICT_EMAIL = "conflict:email"
    POST_NOT_EXIST = "postNotExist"
    DATABASE_NOT_EXIST = "databaseNotExist"
    TAG_NOT_EXIST = "tagNotExist"


class DomainError(Exception):
    """Base class for tagged domain failures."""

    status_code = 400

    def __init__(self, *codes):
        self.codes = tuple(ErrorCode(code) for code in codes)
        super().__init__(", ".join(code.value for code in self.codes))

    @property
    def code(self):
        return self.codes[0]

    def to_dict(self):
        return {"code": self.code.value, "codes": [code.value for code in self.codes]}


class PermissionDenied(DomainError):
    """The acting user lacks the relation the operation requires."""

    status_code = 403

    def __init__(self, *codes):
        super().__init__(*(codes or (ErrorCode.USER_NOT_OWNER,)))


class NotFound(DomainError):
    status_code = 404


class Conflict(DomainError):
    status_code = 409
