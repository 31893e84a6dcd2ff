import os
from sqlalchemy.pool import QueuePool, StaticPool
from urllib.parse import urlparse
import pymysql
pymysql.install_as_MySQLdb()


def _csv(value):
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'change_this_secret_key')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SQLALCHEMY_ENGINE_OPTIONS = {
        "poolclass": QueuePool,
        "pool_size": 5,
        "max_overflow": 2,
        "pool_timeout": 10
    }

    JWT_EXPIRATION_HOURS = int(os.getenv("JWT_EXPIRATION_HOURS", "24"))
    CORS_ORIGINS = _csv(os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    ACCESS_COOKIE_SECURE = os.getenv("ACCESS_COOKIE_SECURE", "True") == "True"
    ACCESS_COOKIE_SAMESITE = os.getenv("ACCESS_COOKIE_SAMESITE", "None")

    DEFAULT_PER_PAGE = 15
    MIN_PER_PAGE = 5
    MAX_PER_PAGE = 100
    USERS_DEFAULT_PER_PAGE = 10
    USERS_MIN_PER_PAGE = 3


class DevConfig(Config):
    """Development Configuration"""
    DEBUG = True
    TESTING = False
    ACCESS_COOKIE_SECURE = False
    ACCESS_COOKIE_SAMESITE = "Lax"
    SQLALCHEMY_DATABASE_URI = os.getenv('SQLALCHEMY_DATABASE_URI', 'mysql+pymysql://root:@localhost/lms_db')


class TestConfig(Config):
    DEBUG = False
    TESTING = True
    SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    ACCESS_COOKIE_SECURE = False
    ACCESS_COOKIE_SAMESITE = "Lax"
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {
        "poolclass": StaticPool,
        "connect_args": {"check_same_thread": False}
    }


class ProdConfig(Config):
    """Production Configuration (Heroku deployment)"""
    DEBUG = False

    raw_db_url = os.getenv('DATABASE_URL')

    if raw_db_url:
        if raw_db_url.startswith("mysql://"):
            raw_db_url = raw_db_url.replace("mysql://", "mysql+pymysql://", 1)

        parsed_url = urlparse(raw_db_url)
        SQLALCHEMY_DATABASE_URI = f"{parsed_url.scheme}://{parsed_url.netloc}{parsed_url.path}"
    else:
        SQLALCHEMY_DATABASE_URI = os.getenv('JAWSDB_URL', 'sqlite:///:memory:')
        SQLALCHEMY_ENGINE_OPTIONS = {}


ENV = os.getenv('FLASK_ENV', 'production').lower()

config_dict = {
    "development": DevConfig,
    "testing": TestConfig,
    "production": ProdConfig
}

CurrentConfig = config_dict.get(ENV, ProdConfig)
