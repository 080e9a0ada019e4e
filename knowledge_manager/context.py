# -*- coding: utf-8 -*-
"""Request-scoped context handed to forms, the rate limiter and services."""

from dataclasses import dataclass, field
from typing import Dict, Optional

from flask import request
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request


@dataclass
class RequestContext:
    """
    Everything a handler needs to know about the current request.

    Attributes:
        user_id (int | None): Acting user, ``None`` for anonymous requests.
        client_ip (str): Address the request came from.
        route (str): Endpoint name, used to scope rate-limit counters.
        errors (dict): Field -> message bag filled by the form validator.
        values (dict): Field -> last submitted value, echoed back on failure.
    """

    user_id: Optional[int]
    client_ip: str
    route: str = ""
    errors: Dict[str, str] = field(default_factory=dict)
    values: Dict[str, str] = field(default_factory=dict)

    def clear(self):
        self.errors.clear()
        self.values.clear()


def build_context():
    """Build the context for the request being handled."""
    verify_jwt_in_request(optional=True)
    identity = get_jwt_identity()
    return RequestContext(
        user_id=int(identity) if identity is not None else None,
        client_ip=request.remote_addr or "unknown",
        route=request.endpoint or "",
    )
