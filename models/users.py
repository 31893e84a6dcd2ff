from models import db
from classes.validators import validate_length
from werkzeug.security import generate_password_hash, check_password_hash

ROLES = ("admin", "user")


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default="user")  # 'admin', 'user'
    acc_status = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime, default=db.func.now(), nullable=False)

    scoreboard = db.relationship("Scoreboard", back_populates="user", uselist=False, cascade="all, delete-orphan")
    course_progress = db.relationship("UserCourseProgress", back_populates="user", cascade="all, delete-orphan")

    def __init__(self, first_name, last_name, email, role="user", acc_status=1, **kwargs):
        validate_length("first_name", first_name, 100)
        validate_length("last_name", last_name, 100)
        validate_length("email", email, 255)
        if role not in ROLES:
            raise ValueError(f"role must be one of {', '.join(ROLES)}.")
        super().__init__(
            first_name=first_name,
            last_name=last_name,
            email=email,
            role=role,
            acc_status=acc_status,
            **kwargs
        )

    def set_password(self, password):
        """Hashes the password before storing."""
        self.password_hash = generate_password_hash(password, method="pbkdf2:sha256")

    def check_password(self, password):
        """Checks if a given password matches the stored hash."""
        return check_password_hash(self.password_hash, password)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_active(self):
        return self.acc_status == 1

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"

    def to_dict(self):
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "role": self.role,
            "acc_status": self.acc_status,
            "created_at": self.created_at,
        }

    def to_summary(self):
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
        }
