from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import session

from ..core.enums import StaffRole
from ..core.exceptions import AuthenticationError, AuthorizationError


def current_role() -> Optional[StaffRole]:
    return StaffRole.parse(session.get("role"))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            raise AuthenticationError("Please log in to continue")
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: StaffRole):
    allowed = set(roles)

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                raise AuthenticationError("Please log in to continue")
            if current_role() not in allowed:
                raise AuthorizationError("You do not have access to this page")
            return view(*args, **kwargs)

        return wrapper

    return decorator


# Common role sets
MANAGERS = (StaffRole.ADMIN, StaffRole.HEAD_COACH)
FRONT_DESK = (StaffRole.ADMIN, StaffRole.HEAD_COACH, StaffRole.RECEPTION)
