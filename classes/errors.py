class ProgressError(Exception):
    """Base class for user-facing progress and enrolment failures."""

    status_code = 400
    error_code = "progress_error"
    default_message = "The request could not be completed."

    def __init__(self, message=None, **context):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.context = context

    def to_dict(self):
        return {
            "success": False,
            "message": self.message,
            "error": self.error_code,
        }


class NotFound(ProgressError):
    status_code = 404
    error_code = "not_found"
    default_message = "Resource not found."


class NotEnrolled(ProgressError):
    status_code = 403
    error_code = "not_enrolled"
    default_message = "You are not enrolled in this course."


class AlreadyCompleted(ProgressError):
    status_code = 409
    error_code = "already_completed"
    default_message = "Section already marked as completed."


class EmptySection(ProgressError):
    status_code = 422
    error_code = "empty_section"
    default_message = "A section without materials cannot be completed."


class AlreadyEnrolled(ProgressError):
    status_code = 409
    error_code = "already_enrolled"
    default_message = "You are already enrolled in this course."


class CourseInactive(ProgressError):
    status_code = 400
    error_code = "course_inactive"
    default_message = "Course is not active."
