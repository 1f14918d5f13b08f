from django.urls import path

from . import views

app_name = "challenges"
urlpatterns = [
    path("", views.query_challenges, name="query_challenges"),  # Query all or a single challenge
]
