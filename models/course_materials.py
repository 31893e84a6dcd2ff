from models import db
from sqlalchemy.orm import relationship
from utils.helpers import format_datetime

MATERIAL_TYPES = ("text", "video", "file", "link")


class CourseMaterial(db.Model):
    __tablename__ = "course_materials"

    id = db.Column(db.Integer, primary_key=True)
    course_section_id = db.Column(db.Integer, db.ForeignKey("course_sections.id", ondelete="CASCADE"), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(50), nullable=False)
    content = db.Column(db.Text, nullable=True)
    material_url = db.Column(db.String(1023), nullable=True)
    sort_order = db.Column(db.Integer, nullable=False, default=1)
    duration = db.Column(db.Integer, nullable=False, default=0)
    created_by = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime, default=db.func.now(), onupdate=db.func.now(), nullable=False)

    section = relationship("CourseSection", back_populates="materials")
    creator = relationship("User", foreign_keys=[created_by])
    updator = relationship("User", foreign_keys=[updated_by])

    @staticmethod
    def get_next_order(section_id):
        last = CourseMaterial.query.filter_by(course_section_id=section_id).order_by(CourseMaterial.sort_order.desc()).first()
        return (last.sort_order + 1) if last else 1

    def __repr__(self):
        return f"<CourseMaterial {self.title} (Section ID {self.course_section_id})>"

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type,
            "content": self.content,
            "material_url": self.material_url,
            "sort_order": self.sort_order,
            "duration": self.duration,
            "created_by": self.creator.full_name if self.creator else None,
            "updated_by": self.updator.full_name if self.updator else None,
            "created_at": format_datetime(self.created_at),
            "updated_at": format_datetime(self.updated_at),
        }
