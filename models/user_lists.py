from models import db
from sqlalchemy.orm import relationship


class UserListItem(db.Model):
    __tablename__ = "user_list_items"

    id = db.Column(db.Integer, primary_key=True)
    list_id = db.Column(db.Integer, db.ForeignKey("user_lists.id", ondelete="CASCADE"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = db.Column(db.DateTime, default=db.func.now(), nullable=False)

    __table_args__ = (
        db.UniqueConstraint("list_id", "user_id", name="unique_list_user"),
    )

    def __repr__(self):
        return f"<UserListItem List {self.list_id} User {self.user_id}>"


class UserList(db.Model):
    """Named group of users, used for giveaways drawn from the scoreboard."""
    __tablename__ = "user_lists"

    id = db.Column(db.Integer, primary_key=True)
    list_name = db.Column(db.String(100), nullable=False, unique=True)
    created_at = db.Column(db.DateTime, default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime, default=db.func.now(), onupdate=db.func.now(), nullable=False)

    users = relationship(
        "User",
        secondary="user_list_items",
        order_by="User.id",
        viewonly=True
    )
    items = relationship("UserListItem", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<UserList {self.list_name}>"

    def member_ids(self):
        return [item.user_id for item in self.items]

    def has_member(self, user_id):
        return UserListItem.query.filter_by(list_id=self.id, user_id=user_id).first() is not None

    def to_dict(self, with_users=False):
        data = {
            "id": self.id,
            "list_name": self.list_name,
            "users_count": len(self.items),
            "created_at": self.created_at,
        }
        if with_users:
            data["users"] = [u.to_summary() for u in self.users]
        return data
