from flask import Blueprint, request, jsonify, make_response, current_app, g
from models.users import User
from models import db
from classes.validators import validate_required, validate_email
from utils.helpers import validation_error
from utils.tokens import get_jwt_token, token_expires_in
from utils.utils import login_required, current_user_id

auth_bp = Blueprint('auth_bp', __name__)

MIN_PASSWORD_LENGTH = 8


def _token_payload(user):
    return {
        "user_id": user.id,
        "email": user.email,
        "role": user.role,
    }


def _respond_with_token(user, message):
    token = get_jwt_token(_token_payload(user))

    response = make_response(jsonify({
        "success": True,
        "message": message,
        "access_token": token,
        "token_type": "bearer",
        "expires_in": token_expires_in(),
        "user": user.to_dict()
    }))

    response.set_cookie(
        "access_token", token,
        httponly=True,
        secure=current_app.config["ACCESS_COOKIE_SECURE"],
        samesite=current_app.config["ACCESS_COOKIE_SAMESITE"],
        path="/",
        max_age=token_expires_in()
    )
    return response


# Login
@auth_bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    email = data.get("email")
    password = data.get("password")

    user = User.query.filter_by(email=email).first() if email else None

    if not user or not password or not user.check_password(password):
        return jsonify({"success": False, "message": "Your email or password is invalid"}), 401

    if not user.is_active:
        return jsonify({"success": False, "message": "Your account is inactive"}), 403

    current_app.logger.info("User %s logged in", user.id)
    return _respond_with_token(user, "Login successful")


# Logout
@auth_bp.route('/logout', methods=['POST'])
def logout():
    response = make_response(jsonify({"success": True, "message": "Successfully logged out"}))

    response.set_cookie(
        "access_token", "",
        httponly=True,
        secure=current_app.config["ACCESS_COOKIE_SECURE"],
        samesite=current_app.config["ACCESS_COOKIE_SAMESITE"],
        path="/",
        max_age=0
    )

    return response


# Refresh
@auth_bp.route('/refresh', methods=['POST'])
@login_required
def refresh():
    user = db.session.get(User, current_user_id())
    if not user or not user.is_active:
        return jsonify({"success": False, "message": "Unauthorized"}), 401
    return _respond_with_token(user, "Token refreshed")


# Register
@auth_bp.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}

    errors = validate_required(data, "first_name", "last_name", "email", "password")
    if not errors:
        try:
            validate_email(data["email"])
        except ValueError as e:
            errors["email"] = [str(e)]
        if len(data["password"]) < MIN_PASSWORD_LENGTH:
            errors["password"] = [f"The password must be at least {MIN_PASSWORD_LENGTH} characters."]
    if errors:
        return validation_error(errors)

    if User.query.filter_by(email=data["email"]).first():
        return jsonify({"success": False, "message": "User already exists"}), 409

    try:
        new_user = User(
            first_name=data["first_name"],
            last_name=data["last_name"],
            email=data["email"],
            role="user"
        )
    except ValueError as e:
        return jsonify({"success": False, "message": str(e)}), 422
    new_user.set_password(data["password"])

    db.session.add(new_user)
    db.session.commit()

    return jsonify({"success": True, "message": "User registered successfully!", "user": new_user.to_dict()}), 201


# Auth Check
@auth_bp.route('/user-profile', methods=['GET'])
@login_required
def user_profile():
    user = db.session.get(User, current_user_id())
    if not user:
        return jsonify({"success": False, "message": "User not found"}), 404

    return jsonify({"success": True, "user": user.to_dict()}), 200


@auth_bp.route('/users/<int:user_id>/profile', methods=['GET'])
@login_required
def user_profile_by_id(user_id):
    user = db.session.get(User, user_id)
    if not user:
        return jsonify({"success": False, "message": "User not found"}), 404

    return jsonify({"success": True, "message": "User profile retrieved successfully", "user": user.to_dict()}), 200


@auth_bp.route('/update-profile', methods=['PUT'])
@login_required
def update_profile():
    data = request.get_json(silent=True) or {}
    errors = validate_required(data, "first_name", "last_name")
    if errors:
        return validation_error(errors)

    user = db.session.get(User, current_user_id())
    if not user:
        return jsonify({"success": False, "message": "User not found"}), 404

    user.first_name = data["first_name"]
    user.last_name = data["last_name"]
    db.session.commit()

    return jsonify({"success": True, "message": "Profile updated successfully", "user": user.to_dict()}), 200


@auth_bp.route('/change-password', methods=['POST'])
@login_required
def change_password():
    data = request.get_json(silent=True) or {}
    errors = validate_required(data, "current_password", "new_password", "new_password_confirmation")
    if not errors:
        if len(data["new_password"]) < MIN_PASSWORD_LENGTH:
            errors["new_password"] = [f"The new password must be at least {MIN_PASSWORD_LENGTH} characters."]
        elif data["new_password"] != data["new_password_confirmation"]:
            errors["new_password"] = ["The new password confirmation does not match."]
    if errors:
        return validation_error(errors)

    user = db.session.get(User, current_user_id())
    if not user or not user.check_password(data["current_password"]):
        return jsonify({"success": False, "message": "Current password is incorrect"}), 400

    user.set_password(data["new_password"])
    db.session.commit()
    current_app.logger.info("User %s changed password", g.user.get("user_id"))

    return jsonify({"success": True, "message": "Password changed successfully"}), 200
