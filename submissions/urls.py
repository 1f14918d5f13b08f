from django.urls import path

from . import views

app_name = "submissions"
urlpatterns = [
    path("submit/", views.submit_code, name="submit_code"),  # Evaluate code against a challenge's hidden tests
    path("history/", views.query_submissions, name="query_submissions"),  # Submission history of a user
    path("solved/", views.query_solved_challenges, name="query_solved_challenges"),  # Challenges a user has solved
]
