from models import db
from sqlalchemy.orm import relationship


class CourseSection(db.Model):
    __tablename__ = "course_sections"

    id = db.Column(db.Integer, primary_key=True)
    module_id = db.Column(db.Integer, db.ForeignKey("course_modules.id", ondelete="CASCADE"), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    nr_of_files = db.Column(db.Integer, nullable=False, default=0)
    duration = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=db.func.now(), nullable=False)

    module = relationship("CourseModule", back_populates="sections")
    materials = relationship(
        "CourseMaterial",
        back_populates="section",
        cascade="all, delete-orphan",
        order_by="CourseMaterial.sort_order"
    )
    progress = relationship("SectionProgress", back_populates="section", cascade="all, delete-orphan")

    @staticmethod
    def ids_for_module(module_id):
        rows = db.session.query(CourseSection.id).filter_by(module_id=module_id).all()
        return [row.id for row in rows]

    @staticmethod
    def count_for_course(course_id):
        from models.course_modules import CourseModule
        return (
            CourseSection.query
            .join(CourseModule, CourseModule.id == CourseSection.module_id)
            .filter(CourseModule.course_id == course_id)
            .count()
        )

    def material_count(self):
        from models.course_materials import CourseMaterial
        return CourseMaterial.query.filter_by(course_section_id=self.id).count()

    def __repr__(self):
        return f"<CourseSection {self.title} (Module ID {self.module_id})>"

    def to_dict(self):
        return {
            "id": self.id,
            "module_id": self.module_id,
            "title": self.title,
            "description": self.description,
            "materials": self.material_count(),
        }
