from django.urls import path

from gangroster.api import views

app_name = "api"
urlpatterns = [
    path("fighters/<uuid:fighter_id>/", views.fighter_view, name="fighter"),
    path(
        "fighters/<uuid:fighter_id>/mutations/<slug:operation>/",
        views.fighter_mutation,
        name="fighter_mutation",
    ),
]
