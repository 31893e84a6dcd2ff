import random
from flask import Blueprint, request, jsonify, current_app
from sqlalchemy.exc import IntegrityError
from models import db
from models.users import User
from models.user_lists import UserList, UserListItem
from classes.validators import validate_required, validate_pagination, EMAIL_RE
from utils.helpers import validation_error, paginate
from utils.utils import admin_required, current_user_id

lists_bp = Blueprint('lists', __name__)

LIST_NAME_MIN = 2
LIST_NAME_MAX = 100


def _list_not_found():
    return jsonify({"success": False, "message": "List does not exist"}), 404


def _user_not_found():
    return jsonify({"success": False, "message": "User does not exist"}), 404


def _validate_list_name(data, list_id=None):
    errors = validate_required(data, "list_name")
    if errors:
        return errors

    name = data["list_name"]
    if not isinstance(name, str) or not LIST_NAME_MIN <= len(name.strip()) <= LIST_NAME_MAX:
        return {"list_name": [f"The list_name must be between {LIST_NAME_MIN} and {LIST_NAME_MAX} characters."]}

    taken = UserList.query.filter(UserList.list_name == name.strip())
    if list_id is not None:
        taken = taken.filter(UserList.id != list_id)
    if taken.first():
        return {"list_name": ["The list_name has already been taken."]}
    return {}


def _split_emails(emails):
    """Returns (users found, invalid emails, unknown emails) for a list of emails."""
    found, invalid, unknown = [], [], []
    for email in emails:
        if not isinstance(email, str) or not EMAIL_RE.match(email):
            invalid.append(email)
            continue
        user = User.query.filter_by(email=email).first()
        if user:
            found.append(user)
        else:
            unknown.append(email)
    return found, invalid, unknown


def _warnings(invalid, unknown=()):
    warnings = []
    if invalid:
        warnings.append("Invalid email format(s): " + ", ".join(str(e) for e in invalid))
    if unknown:
        warnings.append("User(s) not found with email(s): " + ", ".join(unknown))
    return warnings


def _find_list(list_id):
    return db.session.get(UserList, list_id)


def _request_user():
    data = request.get_json(silent=True) or {}
    try:
        return db.session.get(User, int(data.get("user_id")))
    except (TypeError, ValueError):
        return None


@lists_bp.route("", methods=["GET"])
@admin_required
def get_lists():
    cfg = current_app.config
    page, per_page, _, errors = validate_pagination(
        request.args, cfg["USERS_DEFAULT_PER_PAGE"], cfg["USERS_MIN_PER_PAGE"], cfg["MAX_PER_PAGE"]
    )
    if errors:
        return validation_error(errors)

    query = UserList.query.order_by(UserList.id.desc())
    return jsonify({
        "success": True,
        "message": "Lists retrieved successfully",
        "lists": paginate(query, page, per_page, lambda user_list: user_list.to_dict())
    }), 200


#create a list from user ids and/or emails
@lists_bp.route("", methods=["POST"])
@admin_required
def create_list():
    data = request.get_json(silent=True) or {}
    errors = _validate_list_name(data)

    user_ids = data.get("user_ids") or []
    emails = data.get("emails") or []
    if not isinstance(user_ids, list):
        errors["user_ids"] = ["The user_ids must be an array."]
    elif any(not isinstance(uid, int) or not db.session.get(User, uid) for uid in user_ids):
        errors["user_ids"] = ["The selected user_ids are invalid."]
    if not isinstance(emails, list):
        errors["emails"] = ["The emails must be an array."]
    if errors:
        return validation_error(errors)

    found, invalid, unknown = _split_emails(emails)
    member_ids = list(dict.fromkeys(user_ids + [u.id for u in found]))

    user_list = UserList(list_name=data["list_name"].strip())
    db.session.add(user_list)
    try:
        db.session.flush()
        for user_id in member_ids:
            db.session.add(UserListItem(list_id=user_list.id, user_id=user_id))
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return validation_error({"list_name": ["The list_name has already been taken."]})

    current_app.logger.info("List %s created by %s with %s users", user_list.id, current_user_id(), len(member_ids))

    response = {
        "success": True,
        "message": "List created successfully",
        "list": user_list.to_dict(with_users=True)
    }
    warnings = _warnings(invalid, unknown)
    if warnings:
        response["warnings"] = warnings
    return jsonify(response), 201


@lists_bp.route("/<int:list_id>", methods=["PUT"])
@admin_required
def update_list_name(list_id):
    user_list = _find_list(list_id)
    if not user_list:
        return _list_not_found()

    data = request.get_json(silent=True) or {}
    errors = _validate_list_name(data, list_id=user_list.id)
    if errors:
        return validation_error(errors)

    user_list.list_name = data["list_name"].strip()
    db.session.commit()

    return jsonify({"success": True, "message": "List updated successfully", "list": user_list.to_dict()}), 200


@lists_bp.route("/<int:list_id>", methods=["DELETE"])
@admin_required
def delete_list(list_id):
    user_list = _find_list(list_id)
    if not user_list:
        return _list_not_found()

    db.session.delete(user_list)
    db.session.commit()
    current_app.logger.info("List %s deleted by %s", list_id, current_user_id())

    return jsonify({"success": True, "message": "List deleted successfully"}), 200


@lists_bp.route("/<int:list_id>/users", methods=["GET"])
@admin_required
def get_users_in_list(list_id):
    user_list = _find_list(list_id)
    if not user_list:
        return _list_not_found()

    return jsonify({
        "success": True,
        "message": "Users retrieved successfully",
        "users_list": user_list.to_dict(with_users=True)
    }), 200


#users not yet on the list
@lists_bp.route("/<int:list_id>/available-users", methods=["GET"])
@admin_required
def get_available_users(list_id):
    user_list = _find_list(list_id)
    if not user_list:
        return _list_not_found()

    query = User.query
    member_ids = user_list.member_ids()
    if member_ids:
        query = query.filter(User.id.notin_(member_ids))

    return jsonify({
        "success": True,
        "message": "Available users retrieved successfully",
        "available_users": [u.to_summary() for u in query.order_by(User.id).all()]
    }), 200


@lists_bp.route("/<int:list_id>/users", methods=["POST"])
@admin_required
def add_user_to_list(list_id):
    user_list = _find_list(list_id)
    if not user_list:
        return _list_not_found()

    user = _request_user()
    if not user:
        return _user_not_found()

    if user_list.has_member(user.id):
        return jsonify({"success": False, "message": "This user is already added to this list!"}), 409

    db.session.add(UserListItem(list_id=user_list.id, user_id=user.id))
    db.session.commit()

    return jsonify({"success": True, "message": "User added successfully", "list": user_list.to_dict()}), 200


@lists_bp.route("/<int:list_id>/users", methods=["DELETE"])
@admin_required
def remove_user_from_list(list_id):
    user_list = _find_list(list_id)
    if not user_list:
        return _list_not_found()

    user = _request_user()
    if not user:
        return _user_not_found()

    item = UserListItem.query.filter_by(list_id=user_list.id, user_id=user.id).first()
    if not item:
        return jsonify({"success": False, "message": "User does not exist on this list!"}), 409

    db.session.delete(item)
    db.session.commit()

    return jsonify({"success": True, "message": "User removed successfully from list"}), 200


#pick a winner from the list plus any extra emails
@lists_bp.route("/<int:list_id>/pick-winner", methods=["POST"])
@admin_required
def pick_random_winner(list_id):
    user_list = _find_list(list_id)
    if not user_list:
        return _list_not_found()

    data = request.get_json(silent=True) or {}
    extra_emails = data.get("additional_emails") or []
    if not isinstance(extra_emails, list):
        return validation_error({"additional_emails": ["The additional_emails must be an array."]})

    participants = [u.to_summary() for u in user_list.users]
    member_ids = {p["id"] for p in participants}
    found, invalid, unknown = _split_emails(extra_emails)
    for user in found:
        if user.id not in member_ids:
            participants.append(user.to_summary())
            member_ids.add(user.id)
    # unregistered emails can still win
    for email in dict.fromkeys(unknown):
        participants.append({"id": None, "first_name": "", "last_name": "", "email": email})

    warnings = _warnings(invalid)
    if len(participants) < 2:
        if not participants:
            message = "No users in this list to pick a winner from"
        else:
            message = "This list cannot generate a random winner because it has only 1 user"
        response = {"success": False, "message": message}
        if warnings:
            response["warnings"] = warnings
        return jsonify(response), 422

    winner = random.choice(participants)
    current_app.logger.info("Winner picked from list %s: %s", user_list.id, winner["email"])

    response = {"success": True, "message": "Winner selected successfully", "winner_user": winner}
    if warnings:
        response["warnings"] = warnings
    return jsonify(response), 200
