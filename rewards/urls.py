from django.urls import path

from . import views

app_name = "rewards"
urlpatterns = [
    path("balance/", views.query_balance, name="query_balance"),  # XP balance of a user
]
