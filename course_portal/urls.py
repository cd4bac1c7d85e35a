from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("django-admin/", admin.site.urls),
    path("", include("portal.urls")),
    path("", include("users.urls")),
    path("", include("academics.urls")),
    path("", include("finance.urls")),
]

handler404 = "portal.views.not_found"
handler500 = "portal.views.server_error"
