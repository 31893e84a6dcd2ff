import pytest

from app import create_app
from models import db
from models.users import User
from models.courses import Course
from models.course_modules import CourseModule
from models.course_sections import CourseSection
from models.course_materials import CourseMaterial
from utils.tokens import get_jwt_token


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    counter = {"n": 0}

    def _make_user(first_name="Ana", last_name="Student", email=None, role="user", password="password123", acc_status=1):
        counter["n"] += 1
        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email or f"user{counter['n']}@example.com",
            role=role,
            acc_status=acc_status
        )
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def make_course(app):
    """Build a course from a list of per-module section counts.

    ``make_course([2, 1])`` creates two modules, the first with two sections
    and the second with one. Every section gets one material unless listed
    in ``empty_sections`` as (module_index, section_index).
    """

    def _make_course(sections_per_module, status=1, empty_sections=()):
        course = Course(title="Python Basics", description="Intro course", status=status)
        db.session.add(course)
        db.session.flush()

        structure = {"course": course, "modules": [], "sections": []}
        for m_index, section_count in enumerate(sections_per_module):
            module = CourseModule(course_id=course.id, title=f"Module {m_index + 1}", description="Module")
            db.session.add(module)
            db.session.flush()
            module_sections = []
            for s_index in range(section_count):
                section = CourseSection(module_id=module.id, title=f"Section {m_index + 1}.{s_index + 1}", description="Section")
                db.session.add(section)
                db.session.flush()
                if (m_index, s_index) not in empty_sections:
                    db.session.add(CourseMaterial(
                        course_section_id=section.id,
                        title="Reading",
                        type="text",
                        content="Lorem ipsum",
                        sort_order=1
                    ))
                module_sections.append(section)
            structure["modules"].append(module)
            structure["sections"].append(module_sections)

        db.session.commit()
        return structure

    return _make_course


@pytest.fixture
def auth_headers(app):
    def _auth_headers(user):
        token = get_jwt_token({"user_id": user.id, "email": user.email, "role": user.role})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
