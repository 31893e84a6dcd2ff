from flask_sqlalchemy import SQLAlchemy

# Initialize SQLAlchemy
db = SQLAlchemy()

# Import models
from models.users import User

from models.courses import Course
from models.course_modules import CourseModule
from models.course_sections import CourseSection
from models.course_materials import CourseMaterial

from models.course_progress import UserCourseProgress
from models.section_progress import SectionProgress
from models.scoreboard import Scoreboard
from models.user_lists import UserList, UserListItem
