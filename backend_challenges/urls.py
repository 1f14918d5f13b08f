"""
URL configuration for backend_challenges project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.0/topics/http/urls/
"""
from django.urls import path, include

urlpatterns = [
    path("challenges/", include("challenges.urls")),
    path("submissions/", include("submissions.urls")),
    path("rewards/", include("rewards.urls")),
]
