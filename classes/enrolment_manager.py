from flask import current_app
from sqlalchemy.exc import IntegrityError

from models import db
from models.courses import Course
from models.course_modules import CourseModule
from models.course_sections import CourseSection
from models.course_progress import UserCourseProgress
from classes.errors import NotFound, AlreadyEnrolled, CourseInactive


class EnrolmentManager:
    @staticmethod
    def enrol_user(user_id, course_id):
        """Create the progress row for a user on a course, sized from the current course structure."""
        course = db.session.get(Course, course_id)
        if not course:
            raise NotFound("Course not found.", course_id=course_id)
        if not course.is_active:
            raise CourseInactive(course_id=course_id)

        if UserCourseProgress.for_user(user_id, course_id):
            raise AlreadyEnrolled(user_id=user_id, course_id=course_id)

        progress = UserCourseProgress(
            user_id=user_id,
            course_id=course_id,
            pending_sections=CourseSection.count_for_course(course_id),
            pending_modules=len(CourseModule.ids_for_course(course_id)),
        )
        db.session.add(progress)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise AlreadyEnrolled(user_id=user_id, course_id=course_id)

        current_app.logger.info("User %s enrolled in course %s", user_id, course_id)
        return progress

    @staticmethod
    def is_enrolled(user_id, course_id):
        return UserCourseProgress.for_user(user_id, course_id) is not None
