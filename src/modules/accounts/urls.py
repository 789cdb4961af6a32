"""Accounts URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.accounts.views import CreateUserView

urlpatterns = [
    path("users/", CreateUserView.as_view(), name="create_user"),
]
