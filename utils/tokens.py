from flask import current_app, g
import datetime
import jwt


def get_jwt_token(user_data):
    """Generate JWT token with user payload"""
    if not user_data:
        raise ValueError("User data must be provided to generate JWT token")

    hours = current_app.config.get("JWT_EXPIRATION_HOURS", 24)
    expiration = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(hours=hours)
    payload = {"exp": expiration, **user_data}

    token = jwt.encode(payload, current_app.config["SECRET_KEY"], algorithm="HS256")
    return token


def token_expires_in():
    return int(current_app.config.get("JWT_EXPIRATION_HOURS", 24) * 3600)


def decode_jwt(token):
    """Decode and validate JWT token and store user in `g`."""
    try:
        payload = jwt.decode(token, current_app.config["SECRET_KEY"], algorithms=["HS256"])
        g.user = payload
        return payload
    except jwt.ExpiredSignatureError:
        current_app.logger.info("Token expired")
        return None
    except jwt.InvalidTokenError:
        current_app.logger.info("Invalid token provided")
        return None
