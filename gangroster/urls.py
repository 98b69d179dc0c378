"""URL configuration for gangroster."""

from django.contrib import admin
from django.urls import include, path

admin.site.site_header = "Gangroster Admin"

urlpatterns = [
    path("api/", include("gangroster.api.urls")),
    path("admin/", admin.site.urls),
]
