from models import db
from sqlalchemy.orm import relationship


class Scoreboard(db.Model):
    __tablename__ = "scoreboards"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    score = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime, default=db.func.now(), onupdate=db.func.now(), nullable=False)

    user = relationship("User", back_populates="scoreboard")

    def __init__(self, user_id, score=0):
        if user_id is None:
            raise ValueError("user_id is required.")
        super().__init__(user_id=user_id, score=score)

    def __repr__(self):
        return f"<Scoreboard User {self.user_id} score {self.score}>"

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "score": self.score,
            "user": self.user.to_summary() if self.user else None,
        }
