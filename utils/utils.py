from functools import wraps
from flask import request, jsonify, g
from utils.tokens import decode_jwt


def get_request_token():
    token = request.cookies.get("access_token")
    if token:
        return token
    auth_header = request.headers.get("Authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip()
    return None


def login_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = get_request_token()
        if not token:
            return jsonify({"success": False, "message": "Unauthorized"}), 401

        decoded = decode_jwt(token)
        if not decoded:
            return jsonify({"success": False, "message": "Invalid or expired token"}), 401
        g.user = decoded

        return f(*args, **kwargs)

    return decorated_function


def admin_required(f):
    @wraps(f)
    @login_required
    def decorated_function(*args, **kwargs):
        if g.user.get("role") != "admin":
            return jsonify({"success": False, "message": "Unauthorized access."}), 403
        return f(*args, **kwargs)

    return decorated_function


def current_user_id():
    return g.user.get("user_id")
