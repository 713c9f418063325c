# utils/auth.py
from functools import wraps
from flask import abort, current_app, request
from flask_login import current_user


def roles_required(*roles):
    """Write endpoints: 401 when signed out, 403 when the role is not listed."""

    def deco(fn):
        @wraps(fn)
        def inner(*a, **kw):
            # same switch flask_login.login_required honours
            if current_app.config.get("LOGIN_DISABLED"):
                return fn(*a, **kw)
            if not current_user.is_authenticated:
                abort(401)
            if not current_user.has_role(*roles):
                current_app.logger.warning(
                    "%s (%s) denied on %s",
                    current_user.username,
                    current_user.role.value,
                    request.path,
                )
                abort(403)
            return fn(*a, **kw)

        return inner

    return deco


def can_edit(*roles) -> bool:
    """Template-side twin of roles_required, used to hide edit controls."""
    if current_app.config.get("LOGIN_DISABLED"):
        return True
    return current_user.is_authenticated and current_user.has_role(*roles)
