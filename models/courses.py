from models import db
from sqlalchemy.orm import relationship


class Course(db.Model):
    __tablename__ = "courses"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    status = db.Column(db.SmallInteger, nullable=False, default=0, index=True)
    nr_of_files = db.Column(db.Integer, nullable=False, default=0)
    duration = db.Column(db.Integer, nullable=False, default=0)  # seconds
    created_by = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime, default=db.func.now(), onupdate=db.func.now(), nullable=False)

    creator = relationship("User", foreign_keys=[created_by])
    updator = relationship("User", foreign_keys=[updated_by])
    modules = relationship("CourseModule", back_populates="course", cascade="all, delete-orphan")
    progress = relationship("UserCourseProgress", back_populates="course", cascade="all, delete-orphan")

    @property
    def is_active(self):
        return self.status == 1

    def __repr__(self):
        return f"<Course {self.title} (status {self.status})>"

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": "Active" if self.is_active else "Inactive",
            "nr_of_files": self.nr_of_files,
            "duration": self.duration,
            "created_by": self.created_by,
            "updated_by": self.updated_by,
            "created_at": self.created_at
        }
