from models import db
from sqlalchemy.orm import relationship
from sqlalchemy.ext.mutable import MutableList


class UserCourseProgress(db.Model):
    __tablename__ = "user_course_progress"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    course_id = db.Column(db.Integer, db.ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    completed_sections = db.Column(db.Integer, nullable=False, default=0)
    pending_sections = db.Column(db.Integer, nullable=False, default=0)
    completed_modules = db.Column(db.Integer, nullable=False, default=0)
    pending_modules = db.Column(db.Integer, nullable=False, default=0)
    completed_section_ids = db.Column(MutableList.as_mutable(db.JSON), nullable=False, default=list)
    completed_module_ids = db.Column(MutableList.as_mutable(db.JSON), nullable=False, default=list)
    awarded = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime, default=db.func.now(), onupdate=db.func.now(), nullable=False)

    user = relationship("User", back_populates="course_progress")
    course = relationship("Course", back_populates="progress")

    __table_args__ = (
        db.UniqueConstraint("user_id", "course_id", name="unique_user_course"),
    )

    def __init__(self, user_id, course_id, pending_sections=0, pending_modules=0):
        if user_id is None or course_id is None:
            raise ValueError("user_id and course_id are required.")
        super().__init__(
            user_id=user_id,
            course_id=course_id,
            completed_sections=0,
            pending_sections=pending_sections,
            completed_modules=0,
            pending_modules=pending_modules,
            completed_section_ids=[],
            completed_module_ids=[],
            awarded=False,
        )

    @staticmethod
    def for_user(user_id, course_id, lock=False):
        query = UserCourseProgress.query.filter_by(user_id=user_id, course_id=course_id)
        if lock:
            query = query.with_for_update()
        return query.first()

    @property
    def total_sections(self):
        return self.completed_sections + (self.pending_sections or 0)

    @property
    def total_modules(self):
        return self.completed_modules + (self.pending_modules or 0)

    def __repr__(self):
        return f"<UserCourseProgress User {self.user_id} Course {self.course_id}>"

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "course_id": self.course_id,
            "completed_sections": self.completed_sections,
            "pending_sections": self.pending_sections,
            "completed_modules": self.completed_modules,
            "pending_modules": self.pending_modules,
            "completed_section_ids": list(self.completed_section_ids or []),
            "completed_module_ids": list(self.completed_module_ids or []),
            "awarded": self.awarded,
        }
