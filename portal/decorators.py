from functools import wraps

from django.views.decorators.csrf import csrf_exempt

from portal.exceptions import RequestError


def token_required(view_func):
    """
    Authenticate the request from its ``Authorization: Bearer <token>`` header.

    The resolved user replaces ``request.user`` for the rest of the view.
    """

    @csrf_exempt
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        from users.services.auth import user_from_access_token

        header = request.headers.get("Authorization")
        if not header:
            raise RequestError(401, "Not authenticated")

        parts = header.split(" ")
        if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
            raise RequestError(401, "Not authenticated")

        request.user = user_from_access_token(parts[1])
        return view_func(request, *args, **kwargs)

    return wrapper


def role_required(*roles):
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            user = getattr(request, "user", None)
            if user is None or not user.is_authenticated:
                raise RequestError(401, "Not authenticated")
            if getattr(user, "role", None) not in roles:
                raise RequestError(403, "Insufficient permissions")
            return view_func(request, *args, **kwargs)

        return wrapper

    return decorator
