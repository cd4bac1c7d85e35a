from django.db import connection
from django.http import JsonResponse
from django.views.decorators.http import require_GET


@require_GET
def health(request):
    # Raises (and is answered with a 500) when the database is unreachable.
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()
    return JsonResponse({"status": "ok"})


def not_found(request, exception=None):
    return JsonResponse({"detail": "Resource not found"}, status=404)


def server_error(request):
    return JsonResponse({"detail": "Internal server error"}, status=500)
