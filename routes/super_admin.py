from flask import Blueprint, request, jsonify, g, current_app
from sqlalchemy import or_
from sqlalchemy.orm import aliased
from models import db
from models.users import User, ROLES
from models.courses import Course
from models.course_modules import CourseModule
from models.course_sections import CourseSection
from models.course_materials import CourseMaterial, MATERIAL_TYPES
from models.course_progress import UserCourseProgress
from classes.progress_manager import ProgressManager
from classes.validators import validate_required, validate_pagination
from utils.helpers import validation_error, paginate, format_date, clamp_subtract
from utils.utils import admin_required, current_user_id

admin_bp = Blueprint('admin', __name__)


def _page_args(default_key="DEFAULT_PER_PAGE", min_key="MIN_PER_PAGE"):
    cfg = current_app.config
    return validate_pagination(request.args, cfg[default_key], cfg[min_key], cfg["MAX_PER_PAGE"])


def _not_found(what):
    return jsonify({"success": False, "message": f"{what} not found."}), 404


def _int_or_none(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _find(model, raw_id):
    object_id = _int_or_none(raw_id)
    return db.session.get(model, object_id) if object_id is not None else None


#user accounts
@admin_bp.route("/users", methods=["GET"])
@admin_required
def all_users():
    page, per_page, search_term, errors = _page_args("USERS_DEFAULT_PER_PAGE", "USERS_MIN_PER_PAGE")
    if errors:
        return validation_error(errors)

    query = User.query
    if search_term:
        like = f"%{search_term}%"
        query = query.filter(or_(
            User.first_name.ilike(like),
            User.last_name.ilike(like),
            User.email.ilike(like)
        ))
    query = query.order_by(User.id.desc())

    return jsonify({
        "success": True,
        "message": "Users fetched successfully",
        "users": paginate(query, page, per_page, lambda u: u.to_dict())
    }), 200


@admin_bp.route("/users/change-role", methods=["POST"])
@admin_required
def change_user_role():
    data = request.get_json(silent=True) or {}
    errors = validate_required(data, "user_id", "role")
    if not errors and data["role"] not in ROLES:
        errors["role"] = [f"The role must be one of: {', '.join(ROLES)}."]
    if errors:
        return validation_error(errors)

    user = _find(User, data["user_id"])
    if not user:
        return _not_found("User")

    if user.role == data["role"]:
        return jsonify({"success": False, "message": "User already has this role"}), 400

    user.role = data["role"]
    db.session.commit()
    current_app.logger.info("User %s role changed to %s by %s", user.id, user.role, current_user_id())

    return jsonify({"success": True, "message": "User role updated successfully", "user": user.to_dict()}), 200


@admin_bp.route("/users/change-status", methods=["POST"])
@admin_required
def change_account_status():
    data = request.get_json(silent=True) or {}
    errors = validate_required(data, "user_id", "acc_status")
    if not errors and _int_or_none(data["acc_status"]) not in (0, 1):
        errors["acc_status"] = ["The acc_status must be 0 or 1."]
    if errors:
        return validation_error(errors)

    user = _find(User, data["user_id"])
    if not user:
        return _not_found("User")

    if user.id == current_user_id():
        return jsonify({"success": False, "message": "You cannot change your own account status"}), 400

    user.acc_status = int(data["acc_status"])
    db.session.commit()

    return jsonify({"success": True, "message": "Account status updated successfully", "user": user.to_dict()}), 200


#courses
def _course_row(course):
    return {
        "id": course.id,
        "title": course.title,
        "duration": -(-(course.duration or 0) // 60),
        "files": course.nr_of_files,
        "first_name": course.creator.first_name if course.creator else None,
        "last_name": course.creator.last_name if course.creator else None,
        "created": format_date(course.created_at),
        "status": "Active" if course.is_active else "Inactive",
    }


@admin_bp.route("/courses", methods=["GET"])
@admin_required
def get_all_courses():
    page, per_page, search_term, errors = _page_args()
    if errors:
        return validation_error(errors)

    query = Course.query
    if search_term:
        creator = aliased(User)
        like = f"%{search_term}%"
        query = query.outerjoin(creator, Course.created_by == creator.id).filter(or_(
            Course.title.ilike(like),
            creator.first_name.ilike(like),
            creator.last_name.ilike(like)
        ))
    query = query.order_by(Course.created_at.desc(), Course.id.desc())

    return jsonify({
        "success": True,
        "message": "Courses retrieved successfully",
        "courses": paginate(query, page, per_page, _course_row)
    }), 200


@admin_bp.route("/courses", methods=["POST"])
@admin_required
def create_course():
    data = request.get_json(silent=True) or {}
    errors = validate_required(data, "title", "description")
    if errors:
        return validation_error(errors)

    course = Course(
        title=data["title"],
        description=data["description"],
        status=1 if _int_or_none(data.get("status")) == 1 else 0,
        nr_of_files=0,
        duration=0,
        created_by=current_user_id(),
        updated_by=current_user_id()
    )
    db.session.add(course)
    db.session.commit()

    return jsonify({"success": True, "message": "Course created successfully.", "course": course.to_dict()}), 201


@admin_bp.route("/courses/<int:course_id>", methods=["GET"])
@admin_required
def get_course_by_id(course_id):
    course = db.session.get(Course, course_id)
    if not course:
        return _not_found("Course")

    return jsonify({
        "success": True,
        "message": "Course retrieved successfully.",
        "course": {
            **course.to_dict(),
            "modules": [m.to_dict() for m in course.modules]
        }
    }), 200


@admin_bp.route("/courses/<int:course_id>", methods=["PUT"])
@admin_required
def update_course(course_id):
    course = db.session.get(Course, course_id)
    if not course:
        return _not_found("Course")

    data = request.get_json(silent=True) or {}
    errors = validate_required(data, "title", "description")
    if errors:
        return validation_error(errors)

    course.title = data["title"]
    course.description = data["description"]
    course.updated_by = current_user_id()
    db.session.commit()

    return jsonify({"success": True, "message": "Course updated successfully.", "course": course.to_dict()}), 200


@admin_bp.route("/courses/<int:course_id>", methods=["DELETE"])
@admin_required
def delete_course(course_id):
    course = db.session.get(Course, course_id)
    if not course:
        return _not_found("Course")

    db.session.delete(course)
    db.session.commit()
    current_app.logger.info("Course %s deleted by %s", course_id, current_user_id())

    return jsonify({"success": True, "message": "Course deleted successfully."}), 200


@admin_bp.route("/courses/change-status", methods=["POST"])
@admin_required
def change_course_status():
    data = request.get_json(silent=True) or {}
    errors = validate_required(data, "course_id", "status")
    if not errors and _int_or_none(data["status"]) not in (0, 1):
        errors["status"] = ["The status must be 0 or 1."]
    if errors:
        return validation_error(errors)

    course = _find(Course, data["course_id"])
    if not course:
        return _not_found("Course")

    course.status = int(data["status"])
    course.updated_by = current_user_id()
    db.session.commit()

    return jsonify({"success": True, "message": "Course status updated successfully.", "course": course.to_dict()}), 200


#course modules
@admin_bp.route("/modules", methods=["GET"])
@admin_required
def get_all_modules():
    page, per_page, search_term, errors = _page_args()
    course_id = request.args.get("course_id")
    if course_id and not _find(Course, course_id):
        errors["course_id"] = ["The selected course_id is invalid."]
    if errors:
        return validation_error(errors)

    query = CourseModule.query
    if course_id:
        query = query.filter(CourseModule.course_id == int(course_id))
    if search_term:
        like = f"%{search_term}%"
        query = query.filter(or_(CourseModule.title.ilike(like), CourseModule.description.ilike(like)))
    query = query.order_by(CourseModule.created_at.desc(), CourseModule.id.desc())

    return jsonify({
        "success": True,
        "message": "Modules retrieved successfully",
        "modules": paginate(query, page, per_page, lambda m: m.to_dict())
    }), 200


@admin_bp.route("/modules", methods=["POST"])
@admin_required
def create_module():
    data = request.get_json(silent=True) or {}
    errors = validate_required(data, "title", "description", "course_id")
    if not errors and not _find(Course, data["course_id"]):
        errors["course_id"] = ["The selected course_id is invalid."]
    if errors:
        return validation_error(errors)

    module = CourseModule(
        course_id=int(data["course_id"]),
        title=data["title"],
        description=data["description"],
        nr_of_files=0,
        duration=0
    )
    db.session.add(module)
    db.session.commit()

    return jsonify({"success": True, "message": "Module created successfully.", "module": module.to_dict()}), 201


@admin_bp.route("/modules/<int:module_id>", methods=["GET"])
@admin_required
def get_module_by_id(module_id):
    module = db.session.get(CourseModule, module_id)
    if not module:
        return _not_found("Module")

    return jsonify({"success": True, "message": "Module retrieved successfully.", "module": module.to_dict()}), 200


@admin_bp.route("/modules/<int:module_id>", methods=["PUT"])
@admin_required
def update_module(module_id):
    module = db.session.get(CourseModule, module_id)
    if not module:
        return _not_found("Module")

    data = request.get_json(silent=True) or {}
    errors = validate_required(data, "title", "description")
    if errors:
        return validation_error(errors)

    module.title = data["title"]
    module.description = data["description"]
    db.session.commit()

    return jsonify({"success": True, "message": "Module updated successfully.", "module": module.to_dict()}), 200


@admin_bp.route("/modules/<int:module_id>", methods=["DELETE"])
@admin_required
def delete_module(module_id):
    module = db.session.get(CourseModule, module_id)
    if not module:
        return _not_found("Module")

    course = module.course
    if course:
        course.duration = clamp_subtract(course.duration, module.duration)
        course.nr_of_files = clamp_subtract(course.nr_of_files, module.nr_of_files)
    db.session.delete(module)
    db.session.commit()

    return jsonify({"success": True, "message": "Module deleted successfully."}), 200


#module sections
@admin_bp.route("/sections", methods=["GET"])
@admin_required
def get_all_sections():
    page, per_page, search_term, errors = _page_args()
    module_id = request.args.get("module_id")
    module = _find(CourseModule, module_id) if module_id else None
    if module_id and not module:
        errors["module_id"] = ["The selected module_id is invalid."]
    if errors:
        return validation_error(errors)

    query = CourseSection.query
    if module:
        query = query.filter(CourseSection.module_id == module.id)
    if search_term:
        like = f"%{search_term}%"
        query = query.filter(or_(CourseSection.title.ilike(like), CourseSection.description.ilike(like)))
    query = query.order_by(CourseSection.created_at.desc(), CourseSection.id.desc())

    return jsonify({
        "success": True,
        "message": "Sections retrieved successfully",
        "sections": paginate(query, page, per_page, lambda s: s.to_dict()),
        "course_id": module.course_id if module else None
    }), 200


@admin_bp.route("/sections", methods=["POST"])
@admin_required
def create_section():
    data = request.get_json(silent=True) or {}
    errors = validate_required(data, "title", "description", "module_id")
    if not errors and not _find(CourseModule, data["module_id"]):
        errors["module_id"] = ["The selected module_id is invalid."]
    if errors:
        return validation_error(errors)

    section = CourseSection(
        module_id=int(data["module_id"]),
        title=data["title"],
        description=data["description"],
        nr_of_files=0,
        duration=0
    )
    db.session.add(section)
    db.session.commit()

    return jsonify({"success": True, "message": "Section created successfully.", "section": section.to_dict()}), 201


@admin_bp.route("/sections/<int:section_id>", methods=["GET"])
@admin_required
def get_section_by_id(section_id):
    section = db.session.get(CourseSection, section_id)
    if not section:
        return _not_found("Section")

    return jsonify({"success": True, "message": "Section retrieved successfully.", "section": section.to_dict()}), 200


@admin_bp.route("/sections/<int:section_id>", methods=["PUT"])
@admin_required
def update_section(section_id):
    section = db.session.get(CourseSection, section_id)
    if not section:
        return _not_found("Section")

    data = request.get_json(silent=True) or {}
    errors = validate_required(data, "title", "description")
    if errors:
        return validation_error(errors)

    section.title = data["title"]
    section.description = data["description"]
    db.session.commit()

    return jsonify({"success": True, "message": "Section updated successfully.", "section": section.to_dict()}), 200


@admin_bp.route("/sections/<int:section_id>", methods=["DELETE"])
@admin_required
def delete_section(section_id):
    section = db.session.get(CourseSection, section_id)
    if not section:
        return _not_found("Section")

    module = section.module
    if module:
        module.duration = clamp_subtract(module.duration, section.duration)
        module.nr_of_files = clamp_subtract(module.nr_of_files, section.nr_of_files)
        course = module.course
        if course:
            course.duration = clamp_subtract(course.duration, section.duration)
            course.nr_of_files = clamp_subtract(course.nr_of_files, section.nr_of_files)
    db.session.delete(section)
    db.session.commit()

    return jsonify({"success": True, "message": "Section deleted successfully."}), 200


#section materials, totals kept in sync up the chain
def _content_chain(section):
    module = section.module
    return [section, module, module.course]


@admin_bp.route("/sections/<int:section_id>/materials", methods=["GET"])
@admin_required
def get_materials_by_section(section_id):
    section = db.session.get(CourseSection, section_id)
    if not section:
        return _not_found("Section")

    materials = (
        CourseMaterial.query
        .filter_by(course_section_id=section_id)
        .order_by(CourseMaterial.sort_order, CourseMaterial.created_at)
        .all()
    )
    module = section.module

    return jsonify({
        "success": True,
        "message": "Course materials retrieved successfully",
        "section": {"id": section.id, "title": section.title, "description": section.description},
        "module": {"id": module.id, "title": module.title, "description": module.description, "duration": module.duration},
        "course": {"id": module.course.id, "title": module.course.title},
        "materials": [m.to_dict() for m in materials]
    }), 200


@admin_bp.route("/sections/<int:section_id>/materials", methods=["POST"])
@admin_required
def create_material(section_id):
    section = db.session.get(CourseSection, section_id)
    if not section:
        return _not_found("Section")

    data = request.get_json(silent=True) or {}
    errors = validate_required(data, "title", "type")
    if not errors and data["type"] not in MATERIAL_TYPES:
        errors["type"] = [f"The type must be one of: {', '.join(MATERIAL_TYPES)}."]
    duration = _int_or_none(data.get("duration", 0))
    if duration is None or duration < 0:
        errors["duration"] = ["The duration must be a non-negative integer."]
    if errors:
        return validation_error(errors)

    material = CourseMaterial(
        course_section_id=section.id,
        title=data["title"],
        type=data["type"],
        content=data.get("content"),
        material_url=data.get("material_url"),
        sort_order=_int_or_none(data.get("sort_order")) or CourseMaterial.get_next_order(section.id),
        duration=duration,
        created_by=current_user_id(),
        updated_by=current_user_id()
    )
    db.session.add(material)
    for owner in _content_chain(section):
        owner.nr_of_files = (owner.nr_of_files or 0) + 1
        owner.duration = (owner.duration or 0) + duration
    db.session.commit()

    return jsonify({"success": True, "message": "Material created successfully.", "material": material.to_dict()}), 201


@admin_bp.route("/materials/<int:material_id>", methods=["PUT"])
@admin_required
def update_material(material_id):
    material = db.session.get(CourseMaterial, material_id)
    if not material:
        return _not_found("Material")

    data = request.get_json(silent=True) or {}
    errors = validate_required(data, "title")
    if data.get("type") is not None and data["type"] not in MATERIAL_TYPES:
        errors["type"] = [f"The type must be one of: {', '.join(MATERIAL_TYPES)}."]
    duration = _int_or_none(data.get("duration", material.duration))
    if duration is None or duration < 0:
        errors["duration"] = ["The duration must be a non-negative integer."]
    if errors:
        return validation_error(errors)

    delta = duration - (material.duration or 0)
    if delta:
        for owner in _content_chain(material.section):
            owner.duration = max(0, (owner.duration or 0) + delta)

    material.title = data["title"]
    material.type = data.get("type") or material.type
    material.content = data.get("content", material.content)
    material.material_url = data.get("material_url", material.material_url)
    if _int_or_none(data.get("sort_order")) is not None:
        material.sort_order = int(data["sort_order"])
    material.duration = duration
    material.updated_by = current_user_id()
    db.session.commit()

    return jsonify({"success": True, "message": "Material updated successfully.", "material": material.to_dict()}), 200


@admin_bp.route("/materials/<int:material_id>", methods=["DELETE"])
@admin_required
def delete_material(material_id):
    material = db.session.get(CourseMaterial, material_id)
    if not material:
        return _not_found("Material")

    for owner in _content_chain(material.section):
        owner.nr_of_files = clamp_subtract(owner.nr_of_files, 1)
        owner.duration = clamp_subtract(owner.duration, material.duration)
    db.session.delete(material)
    db.session.commit()

    return jsonify({"success": True, "message": "Material deleted successfully."}), 200


#progress report
PROGRESS_MESSAGES = {
    "all_all": "No users enrolled in any courses.",
    "all_specific": "No users enrolled in this course.",
    "specific_all": "This user is not enrolled in any courses.",
    "specific_specific": "This user is not enrolled in this course.",
}


@admin_bp.route("/user-course-progress", methods=["GET"])
@admin_required
def get_user_course_progress():
    course_filter = request.args.get("course_id", "all")
    user_filter = request.args.get("user_id", "all")

    if course_filter != "all":
        course = Course.query.filter_by(id=_int_or_none(course_filter), status=1).first()
        if not course:
            return jsonify({"success": False, "message": "Course not found or not active"}), 404
        course_ids = [course.id]
    else:
        course_ids = [c.id for c in Course.query.filter_by(status=1).order_by(Course.title.asc()).all()]

    if user_filter != "all":
        user = User.query.filter_by(id=_int_or_none(user_filter), role="user", acc_status=1).first()
        if not user:
            return jsonify({"success": False, "message": "User not found or not active"}), 404
        user_ids = [user.id]
    else:
        user_ids = [u.id for u in User.query.filter_by(role="user", acc_status=1).all()]

    rows = (
        UserCourseProgress.query
        .filter(UserCourseProgress.course_id.in_(course_ids))
        .filter(UserCourseProgress.user_id.in_(user_ids))
        .all()
    )

    data = []
    for progress in rows:
        summary = ProgressManager.summarize(progress)
        summary["user"] = progress.user.to_summary()
        summary["course"] = {"id": progress.course.id, "title": progress.course.title}
        data.append(summary)

    progress_message = ""
    if not data:
        key = ("all" if user_filter == "all" else "specific") + "_" + ("all" if course_filter == "all" else "specific")
        progress_message = PROGRESS_MESSAGES.get(key, "No progress data found.")

    current_app.logger.debug("Progress report requested by %s", g.user.get("user_id"))

    return jsonify({
        "success": True,
        "message": "User course progress retrieved successfully",
        "progress_message": progress_message,
        "data": data
    }), 200
