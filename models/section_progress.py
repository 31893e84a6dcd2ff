from models import db
from datetime import datetime
from sqlalchemy.orm import relationship

UNIQUE_SECTION_CONSTRAINT = "unique_user_section"


class SectionProgress(db.Model):
    __tablename__ = "user_course_section_progress"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    course_section_id = db.Column(db.Integer, db.ForeignKey("course_sections.id", ondelete="CASCADE"), nullable=False)
    completed_at = db.Column(db.DateTime, default=datetime.utcnow)

    section = relationship("CourseSection", back_populates="progress")

    __table_args__ = (
        db.UniqueConstraint("user_id", "course_section_id", name=UNIQUE_SECTION_CONSTRAINT),
    )

    def __init__(self, user_id, course_section_id):
        if user_id is None or course_section_id is None:
            raise ValueError("user_id and course_section_id are required.")
        super().__init__(user_id=user_id, course_section_id=course_section_id)

    @staticmethod
    def find(user_id, section_id):
        return SectionProgress.query.filter_by(user_id=user_id, course_section_id=section_id).first()
