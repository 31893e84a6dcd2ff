from flask import current_app
from models import db, Scoreboard, User


def reward_points(module_count):
    """Points granted for finishing a course with the given number of modules."""
    if module_count <= 0:
        return 0
    if module_count == 1:
        return 100
    if module_count == 2:
        return 111
    if module_count <= 4:
        return 123
    if module_count == 5:
        return 155
    return 199


def get_or_create_scoreboard(user_id):
    scoreboard = Scoreboard.query.filter_by(user_id=user_id).first()
    if not scoreboard:
        scoreboard = Scoreboard(user_id=user_id, score=0)
        db.session.add(scoreboard)
        db.session.flush()
    return scoreboard


def add_score(user_id, points):
    """Increments the user's score inside the caller's transaction."""
    scoreboard = get_or_create_scoreboard(user_id)
    Scoreboard.query.filter_by(id=scoreboard.id).update(
        {Scoreboard.score: Scoreboard.score + points},
        synchronize_session=False
    )
    db.session.flush()
    db.session.refresh(scoreboard)
    current_app.logger.info("Scoreboard updated for user %s: +%s (total %s)", user_id, points, scoreboard.score)
    return scoreboard


def get_leaderboard():
    return (
        Scoreboard.query
        .join(User, Scoreboard.user_id == User.id)
        .order_by(Scoreboard.score.desc(), User.first_name.asc(), User.last_name.asc())
        .all()
    )
