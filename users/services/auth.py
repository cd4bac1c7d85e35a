import logging

from users.models import CustomUser as User
from users.tokens import (
    ACCESS,
    REFRESH,
    create_access_token,
    create_refresh_token,
    decode_token,
)
from portal.exceptions import RequestError

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def find_user_by_email(email):
    if not email:
        return None
    return User.objects.filter(email__iexact=email).first()


def _normalized_email(payload):
    email = payload.get("email")
    if not isinstance(email, str):
        return None
    return email.strip().lower() or None


def signup_user(payload):
    email = _normalized_email(payload)
    full_name = payload.get("full_name")
    full_name = full_name.strip() if isinstance(full_name, str) else None
    password = payload.get("password")

    if not email or not full_name or not password:
        raise RequestError(400, "email, full_name and password are required")
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise RequestError(400, "Password must be at least 8 characters long")
    if find_user_by_email(email):
        raise RequestError(400, "Email already registered")

    user = User.objects.create_user(email=email, password=password, full_name=full_name, role="user")
    logger.info("New account %s (id=%s)", user.email, user.id)
    return user


def authenticate_user(payload):
    email = _normalized_email(payload)
    password = payload.get("password")
    if not email or not password:
        raise RequestError(400, "email and password are required")

    user = find_user_by_email(email)
    if user is None or not user.check_password(password):
        raise RequestError(401, "Invalid credentials")
    if not user.is_active:
        raise RequestError(403, "User is inactive")
    return user


def generate_token_pair(user):
    return {
        "access_token": create_access_token(user.id),
        "refresh_token": create_refresh_token(user.id),
        "token_type": "bearer",
    }


def _load_subject(payload):
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        raise RequestError(401, "Invalid token")


def user_from_refresh_token(refresh_token):
    if not refresh_token:
        raise RequestError(400, "refresh_token is required")

    payload = decode_token(refresh_token, REFRESH)
    if payload.get("type") != REFRESH:
        raise RequestError(400, "Invalid refresh token")

    user = User.objects.filter(id=_load_subject(payload)).first()
    if user is None:
        raise RequestError(404, "User not found")
    if not user.is_active:
        raise RequestError(403, "User is inactive")
    return user


def user_from_access_token(access_token):
    payload = decode_token(access_token, ACCESS)
    if payload.get("type") != ACCESS:
        raise RequestError(401, "Invalid token type")

    user = User.objects.filter(id=_load_subject(payload)).first()
    if user is None:
        raise RequestError(401, "Invalid token")
    if not user.is_active:
        raise RequestError(403, "User inactive")
    return user
