from django.conf import settings
from django.core import signing

from portal.exceptions import RequestError

TOKEN_SALT = "course_portal.users.tokens"

ACCESS = "access"
REFRESH = "refresh"


def _lifetime_seconds(token_type):
    if token_type == ACCESS:
        return settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    return settings.REFRESH_TOKEN_EXPIRE_MINUTES * 60


def create_token(subject, token_type):
    return signing.dumps(
        {"sub": str(subject), "type": token_type},
        key=settings.TOKEN_SECRET_KEY,
        salt=TOKEN_SALT,
        compress=True,
    )


def create_access_token(subject):
    return create_token(subject, ACCESS)


def create_refresh_token(subject):
    return create_token(subject, REFRESH)


def decode_token(token, token_type):
    """
    Verify the signature and age of ``token``.

    The age limit is the lifetime of ``token_type``; callers still compare the
    payload's ``type`` with the one they expect.
    """
    try:
        return signing.loads(
            token,
            key=settings.TOKEN_SECRET_KEY,
            salt=TOKEN_SALT,
            max_age=_lifetime_seconds(token_type),
        )
    except signing.BadSignature:
        # SignatureExpired is a BadSignature
        raise RequestError(401, "Invalid token")
