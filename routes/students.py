from flask import Blueprint, jsonify
from models import db
from models.courses import Course
from models.course_sections import CourseSection
from models.course_materials import CourseMaterial
from models.course_progress import UserCourseProgress
from models.section_progress import SectionProgress
from classes.enrolment_manager import EnrolmentManager
from classes.progress_manager import ProgressManager
from classes.errors import NotFound, NotEnrolled
from utils.score_service import get_leaderboard
from utils.utils import login_required, current_user_id

student_bp = Blueprint("student", __name__)


#Fetch active courses with the caller's enrolment
@student_bp.route("/courses", methods=["GET"])
@login_required
def get_courses():
    user_id = current_user_id()
    courses = Course.query.filter_by(status=1).order_by(Course.title.asc()).all()
    enrolled_ids = {
        p.course_id for p in UserCourseProgress.query.filter_by(user_id=user_id).all()
    }

    return jsonify({
        "success": True,
        "courses": [
            {**course.to_dict(), "enrolled": course.id in enrolled_ids}
            for course in courses
        ]
    }), 200


@student_bp.route("/courses/<int:course_id>/enrol", methods=["POST"])
@login_required
def enrol(course_id):
    progress = EnrolmentManager.enrol_user(current_user_id(), course_id)
    return jsonify({
        "success": True,
        "message": "Enrolled successfully.",
        "progress": progress.to_dict()
    }), 201


@student_bp.route("/courses/<int:course_id>/progress", methods=["GET"])
@login_required
def get_course_progress(course_id):
    if not db.session.get(Course, course_id):
        raise NotFound("Course not found.", course_id=course_id)

    progress = UserCourseProgress.for_user(current_user_id(), course_id)
    if not progress:
        raise NotEnrolled(course_id=course_id)

    return jsonify({"success": True, "progress": ProgressManager.summarize(progress)}), 200


@student_bp.route("/progress", methods=["GET"])
@login_required
def get_my_progress():
    rows = UserCourseProgress.query.filter_by(user_id=current_user_id()).all()
    return jsonify({
        "success": True,
        "progress": [
            {**ProgressManager.summarize(p), "course": {"id": p.course.id, "title": p.course.title}}
            for p in rows
        ]
    }), 200


#Materials of a section, only for enrolled users
@student_bp.route("/sections/<int:section_id>/materials", methods=["GET"])
@login_required
def get_section_materials(section_id):
    section = db.session.get(CourseSection, section_id)
    if not section:
        raise NotFound("Section not found.", section_id=section_id)

    if not EnrolmentManager.is_enrolled(current_user_id(), section.module.course_id):
        raise NotEnrolled(course_id=section.module.course_id)

    materials = (
        CourseMaterial.query
        .filter_by(course_section_id=section_id)
        .order_by(CourseMaterial.sort_order, CourseMaterial.created_at)
        .all()
    )
    completed = SectionProgress.find(current_user_id(), section_id) is not None

    return jsonify({
        "success": True,
        "section": {"id": section.id, "title": section.title, "description": section.description},
        "completed": completed,
        "materials": [m.to_dict() for m in materials]
    }), 200


#Mark a section complete
@student_bp.route("/sections/<int:section_id>/complete", methods=["POST"])
@login_required
def mark_section_complete(section_id):
    result = ProgressManager.mark_section_done(current_user_id(), section_id)

    return jsonify({
        "success": True,
        "message": "Section marked as completed.",
        **result
    }), 201


#Undo a section completion
@student_bp.route("/sections/<int:section_id>/complete", methods=["DELETE"])
@login_required
def mark_section_incomplete(section_id):
    result = ProgressManager.mark_section_undone(current_user_id(), section_id)

    return jsonify({
        "success": True,
        "message": "Section marked as not completed.",
        **result
    }), 200


#Fetch completed sections
@student_bp.route("/sections/completed", methods=["GET"])
@login_required
def get_completed_sections():
    progress = SectionProgress.query.filter_by(user_id=current_user_id()).all()
    completed_ids = [p.course_section_id for p in progress]
    return jsonify({"success": True, "completed_sections": completed_ids}), 200


@student_bp.route("/scoreboard", methods=["GET"])
@login_required
def get_scoreboard():
    return jsonify({
        "success": True,
        "message": "Scoreboard retrieved successfully",
        "data": [row.to_dict() for row in get_leaderboard()]
    }), 200
