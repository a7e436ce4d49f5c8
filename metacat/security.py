"""
User profiles and the permission check applied to mutating routes.

Credentials are sent with HTTP Basic authentication and checked against the
users table. A request without credentials is a Guest.
"""

from __future__ import annotations

from enum import Enum
from functools import wraps
from typing import Optional

from flask import g, jsonify, request
from werkzeug.security import check_password_hash

from metacat.core import database as db
from metacat.logger import get_logger

logger = get_logger(__name__)

REALM = "metacat"


class Profile(Enum):
    """User profiles, most privileged first."""

    ADMINISTRATOR = "Administrator"
    USER_ADMIN = "UserAdmin"
    REVIEWER = "Reviewer"
    EDITOR = "Editor"
    REGISTERED_USER = "RegisteredUser"
    GUEST = "Guest"

    @property
    def rank(self) -> int:
        return list(Profile).index(self)

    def has(self, required: "Profile") -> bool:
        """True when this profile grants at least the required one."""
        return self.rank <= required.rank

    @classmethod
    def parse(cls, value: str) -> "Profile":
        for profile in cls:
            if profile.value.lower() == (value or "").lower():
                return profile
        raise ValueError(f"Unknown profile '{value}'")


def authenticate() -> Optional[dict]:
    """
    Resolve the current user from Basic credentials.

    Returns None for anonymous requests and for invalid credentials.
    """
    auth = request.authorization
    if auth is None or not auth.username:
        return None

    user = db.get_user_by_username(auth.username)
    if user and check_password_hash(user["password_hash"], auth.password or ""):
        return user

    logger.warning(f"Failed authentication for user '{auth.username}'")
    return None


def current_profile() -> Profile:
    user = getattr(g, "user", None)
    if not user:
        return Profile.GUEST
    try:
        return Profile.parse(user["profile"])
    except ValueError:
        logger.error(f"User '{user['username']}' has unknown profile '{user['profile']}'")
        return Profile.GUEST


def _unauthorized():
    response = jsonify({"error": "Authentication required"})
    response.status_code = 401
    response.headers["WWW-Authenticate"] = f'Basic realm="{REALM}"'
    return response


def require_profile(required: Profile):
    """Route decorator allowing users whose profile is at least `required`."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.user = authenticate()
            if g.user is None:
                return _unauthorized()

            profile = current_profile()
            if not profile.has(required):
                logger.warning(
                    "User '%s' (%s) denied access to %s",
                    g.user["username"], profile.value, request.path,
                )
                return jsonify({"error": f"{required.value} profile required"}), 403

            return view(*args, **kwargs)

        return wrapper

    return decorator
