import os
from dotenv import load_dotenv
load_dotenv()
from flask import Flask, jsonify, request, g
from flask_cors import CORS
from flask_migrate import Migrate
from sqlalchemy.exc import SQLAlchemyError
from config import config_dict, ProdConfig
from models import db
from classes.errors import ProgressError
from commands import register_commands
from routes.authentication import auth_bp
from routes.super_admin import admin_bp
from routes.students import student_bp
from routes.user_lists import lists_bp

migrate = Migrate()


def register_error_handlers(app):
    @app.errorhandler(ProgressError)
    def handle_progress_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        user = g.get("user") or {}
        app.logger.error(
            "Database error on %s %s (user_id=%s): %s", request.method, request.path, user.get("user_id"), error
        )
        return jsonify({
            "success": False,
            "message": "Something went wrong. Please try again later.",
            "error": "internal_error"
        }), 500


def create_app(env=None):
    app = Flask(__name__)

    env = (env or os.environ.get("FLASK_ENV", "production")).lower()
    app.config.from_object(config_dict.get(env, ProdConfig))
    app.logger.setLevel(app.config["LOG_LEVEL"])
    app.logger.info("Environment: %s", env)

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=True
    )

    db.init_app(app)
    migrate.init_app(app, db)

    @app.route('/')
    def home():
        return "Welcome to the LMS App!"

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')
    app.register_blueprint(student_bp, url_prefix='/api/student')
    app.register_blueprint(lists_bp, url_prefix='/api/admin/lists')

    register_error_handlers(app)
    register_commands(app)

    return app


app = create_app()

if __name__ == '__main__':
    app.run(debug=app.config['DEBUG'])
