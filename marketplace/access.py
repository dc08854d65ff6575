"""Role and ownership gates used by every service before it mutates state."""

from __future__ import annotations

import logging

from .exceptions import AuthorizationError
from .identity import same_entity
from .lifecycle import Role

logger = logging.getLogger(__name__)


def require_role(user, *roles: str):
    """Return ``user`` if it is an active account holding one of ``roles``."""
    if user is None or not getattr(user, "is_authenticated", False):
        raise AuthorizationError("anonymous caller")
    if not user.is_operational:
        logger.warning("Blocked %s action by non-active user %s (%s)", "/".join(roles), user.pk, user.status)
        raise AuthorizationError(f"user status is {user.status}")
    if roles and not user.has_role(*roles):
        logger.warning("Blocked %s action by user %s with role %s", "/".join(roles), user.pk, user.role)
        raise AuthorizationError(f"role {user.role} not in {roles}")
    return user


def require_student(user):
    return require_role(user, Role.STUDENT)


def require_admin(user):
    return require_role(user, Role.ADMIN)


def require_landlord(user):
    require_role(user, Role.LANDLORD)
    profile = getattr(user, "landlord_profile", None)
    if profile is None:
        raise AuthorizationError("landlord has no profile")
    return profile


def require_hostel_owner(user, hostel):
    profile = require_landlord(user)
    if not same_entity(hostel.landlord_id, profile):
        logger.warning("User %s tried to manage hostel %s owned by another landlord", user.pk, hostel.pk)
        raise AuthorizationError("hostel belongs to another landlord")
    return profile


def require_self(user, owner, what: str = "record"):
    if not same_entity(owner, user):
        logger.warning("User %s tried to act on another user's %s", user.pk, what)
        raise AuthorizationError(f"{what} belongs to another user")
    return user
