from sqlalchemy.orm import relationship
from models import db


class CourseModule(db.Model):
    __tablename__ = "course_modules"

    id = db.Column(db.Integer, primary_key=True)
    course_id = db.Column(db.Integer, db.ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    nr_of_files = db.Column(db.Integer, nullable=False, default=0)
    duration = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=db.func.now(), nullable=False)

    course = relationship("Course", back_populates="modules")
    sections = relationship("CourseSection", back_populates="module", cascade="all, delete-orphan")

    @staticmethod
    def ids_for_course(course_id):
        rows = db.session.query(CourseModule.id).filter_by(course_id=course_id).all()
        return [row.id for row in rows]

    def __repr__(self):
        return f"<CourseModule {self.title} (Course ID {self.course_id})>"

    def to_dict(self):
        return {
            "id": self.id,
            "course_id": self.course_id,
            "title": self.title,
            "description": self.description,
            "section_nr": len(self.sections),
            "nr_of_files": self.nr_of_files,
            "duration": self.duration,
        }
