"""Session-based guards for controllers.

Login itself belongs to the external auth layer; it is expected to put
`user_id` and `role` into the Flask session.
"""

from __future__ import annotations

from functools import wraps

from flask import jsonify, session

from ..core.enums import Role


def current_role() -> Role | None:
    try:
        return Role(session.get("role"))
    except ValueError:
        return None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"error": "Vui lòng đăng nhập để tiếp tục!"}), 401
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"error": "Vui lòng đăng nhập để tiếp tục!"}), 401
            if session.get("role") not in allowed:
                return jsonify({"error": "Bạn không có quyền"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


admin_required = roles_required(Role.ADMIN)
