import click
from models import db
from models.users import User


def register_commands(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables without running migrations."""
        db.create_all()
        click.echo("Database tables created.")

    @app.cli.command("create-admin")
    @click.argument("email")
    @click.argument("password")
    @click.argument("first_name")
    @click.argument("last_name")
    def create_admin(email, password, first_name, last_name):
        if User.query.filter_by(email=email).first():
            click.echo(f"User {email} already exists!")
            return

        user = User(first_name=first_name, last_name=last_name, email=email, role="admin")
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        click.echo(f"Admin {email} created successfully!")

    @app.cli.command("update-password")
    @click.argument("email")
    @click.argument("password")
    def update_password(email, password):
        user = User.query.filter_by(email=email).first()
        if user:
            user.set_password(password)
            db.session.commit()
            click.echo("Password updated successfully!")
        else:
            click.echo("User not found!")
